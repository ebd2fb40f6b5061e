"""Bookings app package.

The booking ledger: customers reserve participant slots on experiences,
guides move bookings through their lifecycle, and completed bookings can be
reviewed once. Capacity admission runs in a transaction with the experience
row locked so an experience is never oversold.
"""
