"""Reservations app package.

Short-stay reservation and availability engine. It decides whether a
property is free for a date range, holds a range while a booking is
being finalized and guarantees that active reservations of one property
never overlap. Writes go through a transactional unit of work that
serializes writers per property; on PostgreSQL a range exclusion
constraint backs it up.
"""
