"""
HTTP API for TicketScan.
"""
