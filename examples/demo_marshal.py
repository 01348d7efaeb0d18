#!/usr/bin/env python3
"""Demonstration of marshalling models into GraphQL documents.

This script shows how to:
1. Describe a query with pydantic models and field tags
2. Marshal it into a body, fragments and variables
3. Assemble query and mutation documents

Run it from the repository root:
    python examples/demo_marshal.py
"""

from typing import Annotated

from pydantic import BaseModel

from gql_pymarshal import GraphQL, marshal, set_indent


class UserBasic(BaseModel):
    id: str
    name: str
    email: str


class ArticleContent(BaseModel):
    title: str
    body: str


class VideoContent(BaseModel):
    title: str
    url: str


class ContentUnion(BaseModel):
    typename: Annotated[str, GraphQL("__typename,union")]
    article: Annotated[ArticleContent, GraphQL("article,inline")]
    video: Annotated[VideoContent, GraphQL("video,inline")]


class AddressInline(BaseModel):
    city: str
    street: str
    zip_code: Annotated[str, GraphQL("zipCode")]


class ProductItem(BaseModel):
    id: str
    title: str


class ProductConnection(BaseModel):
    nodes: list[ProductItem]


class Profile(BaseModel):
    query_id: Annotated[str, GraphQL("queryId")]
    product_list: Annotated[
        ProductConnection,
        GraphQL("productList(first:10, query:$:String!, id:$id:Int!, page:$page:Int=1)"),
    ]
    author: UserBasic
    reviewer: UserBasic
    content: ContentUnion
    address: Annotated[AddressInline, GraphQL("address,inline")]


class QueryFull(BaseModel):
    profile: Annotated[Profile, GraphQL("profile(author:$author:String!)")]
    contents: Annotated[list[ContentUnion], GraphQL("contents(author:$author:String!)")]


class ProductVariant(BaseModel):
    id: str
    price: str


class ProductVariantsBulkUpdate(BaseModel):
    product_variants: Annotated[list[ProductVariant], GraphQL("productVariants")]


class Mutation(BaseModel):
    bulk_update: Annotated[
        ProductVariantsBulkUpdate,
        GraphQL("productVariantsBulkUpdate(productId:$productId:ID!, variants:$variants:[ProductVariantsBulkInput!]!)"),
    ]


def main():
    print("=== gql-pymarshal demo ===\n")

    print("1. Marshalling QueryFull...")
    document = marshal(QueryFull)
    print(f"   {len(document.fragments)} fragments, {len(document.variables)} variables")
    for variable in document.variables:
        print(f"   - {variable.declaration()}  used at {', '.join(variable.usage_paths)}")

    print("\n2. Query document:\n")
    print(document.query("GetProfile"))

    print("\n3. Mutation document with a tab indent:\n")
    set_indent("\t")
    print(marshal(Mutation).mutation("productVariantsBulkUpdate"))

    print("\n=== Demo Complete ===")


if __name__ == "__main__":
    main()
