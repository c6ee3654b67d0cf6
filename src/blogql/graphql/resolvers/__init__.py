"""Resolver package for the GraphQL schema.

Resolvers validate arguments, call the data access layer, and build the
GraphQL types returned by the root query.
"""
