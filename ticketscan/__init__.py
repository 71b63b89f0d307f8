"""
TicketScan - family flight-fare meta-search.

Queries several flight data providers in parallel, normalizes their offers
into one shape and prices them for adults plus lap infants.
"""

__version__ = "0.1.0"
__app_name__ = "TicketScan"
