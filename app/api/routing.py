"""
Path convertor for product IDs.

`/products/search` and `/products/bulk` share the `/products/<segment>`
shape with the single-product routes. The `product_id` convertor matches any
single segment except those reserved words, so a request such as
`PUT /products/search` resolves to the search route (405) instead of being
read as an ID (400). The segment may be empty: `/products/` is an invalid
ID rather than a redirect to `/products`.

The segment is handed to the endpoint as a string; the endpoint's `int`
annotation does the decimal parsing, and a failure there becomes a 400.
"""

from starlette.convertors import Convertor, register_url_convertor

RESERVED_SEGMENTS = ("search", "bulk")


class ProductIdConvertor(Convertor):
    regex = "(?!(?:" + "|".join(RESERVED_SEGMENTS) + ")$)[^/]*"

    def convert(self, value: str) -> str:
        return value

    def to_string(self, value) -> str:
        return str(value)


register_url_convertor("product_id", ProductIdConvertor())
