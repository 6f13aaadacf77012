"""Notifications app package.

Back-office notifications raised by domain events (for example a new
short-stay reservation). Delivery is fire-and-forget: every function
here reports failure through its return value and the log, never by
raising into the caller.
"""
