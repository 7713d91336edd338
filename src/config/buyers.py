# -*- coding: utf-8 -*-
"""
Buyer domain enumerations.

Single definition of the areas, buyer types and sources used by the buyer,
email list and import endpoints. Ids are the stored values; labels are for
display and generated list names.
"""

AREAS = [
    {'id': 'DFW', 'label': 'Dallas Fort Worth'},
    {'id': 'Austin', 'label': 'Austin'},
    {'id': 'Houston', 'label': 'Houston'},
    {'id': 'San Antonio', 'label': 'San Antonio'},
    {'id': 'Other Areas', 'label': 'Other Areas'},
]

BUYER_TYPES = [
    {'id': 'CashBuyer', 'label': 'Cash Buyer'},
    {'id': 'Builder', 'label': 'Builder'},
    {'id': 'Developer', 'label': 'Developer'},
    {'id': 'Realtor', 'label': 'Realtor'},
    {'id': 'Investor', 'label': 'Investor'},
    {'id': 'Wholesaler', 'label': 'Wholesaler'},
]

AREA_IDS = [area['id'] for area in AREAS]
BUYER_TYPE_IDS = [buyer_type['id'] for buyer_type in BUYER_TYPES]

# Sources
SOURCE_MANUAL_ENTRY = 'Manual Entry'
SOURCE_VIP = 'VIP Buyers List'
SOURCE_CSV_IMPORT = 'CSV Import'

DEFAULT_EMAIL_STATUS = 'available'

# Offers
OFFER_STATUSES = ['PENDING', 'ACCEPTED', 'REJECTED', 'COUNTERED', 'EXPIRED']
DEFAULT_OFFER_STATUS = 'PENDING'

# Users
USER_ROLES = ['ADMIN', 'USER']


def area_label(area_id: str) -> str:
    for area in AREAS:
        if area['id'] == area_id:
            return area['label']
    return area_id


def buyer_type_label(buyer_type_id: str) -> str:
    for buyer_type in BUYER_TYPES:
        if buyer_type['id'] == buyer_type_id:
            return buyer_type['label']
    return buyer_type_id
