"""Describes the fridge domain. Centres around the `Recipe`.

Why is this hard?

- It mostly isn't. A recipe comes from a single chat completion.
- The completion is free text, so parsing it is best effort, field by field.
- The only invariant is that a recipe always has a title.

The completion endpoint is the one external service in the domain.
Should be able to fake it with a transport.
"""
