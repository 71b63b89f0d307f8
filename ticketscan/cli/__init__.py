"""
Command-line interface for TicketScan.
"""
