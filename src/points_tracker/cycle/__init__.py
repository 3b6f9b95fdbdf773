"""Billing-cycle calendar.

The company closes its books on the 25th: a cycle runs from day 26 of one
month through day 25 of the next and is split into five 7-day weeks.
"""
