"""Experiences app package.

Catalog of bookable experiences published by approved guides. Listings are
never physically removed; a guide retires one by flipping ``is_active``.
Ratings shown here are maintained by the bookings app whenever a review is
submitted.
"""
