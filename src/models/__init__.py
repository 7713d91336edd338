# -*- coding: utf-8 -*-
from src.infra.db import db

from .user import User
from .buyer import Buyer
from .offer import Offer, Property
from .email_list import EmailList, EmailListMembership
from .activity import BuyerActivity
