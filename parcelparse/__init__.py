"""
parcelparse: order, shipment and product extraction from e-commerce emails.
"""

from parcelparse.parser import EmailParser
