"""
Test utilities and factories for creating test data
"""
import random
import string
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.cache import cache
from django.test import TestCase
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken

from millpanel.catalog.models import Quality, Fabric
from millpanel.labs.models import Lab
from millpanel.mills.models import Mill, MillInput, MillOutput, Dispatch
from millpanel.orders.models import Order, OrderItem
from millpanel.parties.models import Party

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, password='testpass123', role='user', name=None):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        return User.objects.create_user(
            username=username,
            password=password,
            name=name or username.title(),
            role=role,
        )

    @staticmethod
    def create_superadmin(username=None, password='testpass123'):
        return TestDataFactory.create_user(username=username, password=password, role='superadmin')

    @staticmethod
    def create_party(name=None, contact_name='', contact_phone=''):
        """Create a test party"""
        if not name:
            name = f'Party_{TestDataFactory.random_string(6)}'
        return Party.objects.create(name=name, contact_name=contact_name, contact_phone=contact_phone)

    @staticmethod
    def create_quality(name=None, description=''):
        """Create a test quality"""
        if not name:
            name = f'Quality_{TestDataFactory.random_string(6)}'
        return Quality.objects.create(name=name, description=description)

    @staticmethod
    def create_fabric(quality_code=None, quality_name='Cotton Poplin', weaver='Shree Weavers', **fields):
        if not quality_code:
            quality_code = f'QC-{TestDataFactory.random_string(6).upper()}'
        defaults = {
            'weaver_quality_name': 'SW-60',
            'greigh_width': Decimal('63.00'),
            'finish_width': Decimal('58.00'),
            'weight': Decimal('0.12'),
            'gsm': Decimal('110.00'),
        }
        defaults.update(fields)
        return Fabric.objects.create(
            quality_code=quality_code, quality_name=quality_name, weaver=weaver, **defaults
        )

    @staticmethod
    def create_order(party=None, user=None, items=None, order_type='Dying', status=None,
                     arrival_date=None, delivery_date=None, **fields):
        """
        Create a test order. `items` is a list of dicts with OrderItem fields;
        by default one item with a fresh quality is created.
        """
        if not party:
            party = TestDataFactory.create_party()
        order = Order.objects.create(
            party=party,
            order_type=order_type,
            status=status,
            arrival_date=arrival_date or date.today(),
            delivery_date=delivery_date,
            created_by=user,
            **fields
        )
        if items is None:
            items = [{'quality': TestDataFactory.create_quality(), 'quantity': Decimal('100.00')}]
        for position, item in enumerate(items):
            OrderItem.objects.create(order=order, position=position, **item)
        return order

    @staticmethod
    def create_lab(order, order_item=None, lab_send_date=None, sample_number='', **fields):
        """Create a test lab"""
        return Lab.objects.create(
            order=order,
            order_item=order_item,
            lab_send_date=lab_send_date or date.today(),
            sample_number=sample_number,
            **fields
        )

    @staticmethod
    def create_mill(name=None, is_active=True):
        if not name:
            name = f'Mill_{TestDataFactory.random_string(6)}'
        return Mill.objects.create(name=name, is_active=is_active)

    @staticmethod
    def create_mill_input(order, mill=None, greigh_mtr=Decimal('500.00'), pcs=5, quality=None, **fields):
        return MillInput.objects.create(
            order=order,
            mill=mill or TestDataFactory.create_mill(),
            mill_date=fields.pop('mill_date', date.today()),
            chalan_no=fields.pop('chalan_no', f'CH-{TestDataFactory.random_string(4)}'),
            greigh_mtr=greigh_mtr,
            pcs=pcs,
            quality=quality,
            **fields
        )

    @staticmethod
    def create_mill_output(order, finished_mtr=Decimal('450.00'), mill_rate=Decimal('12.50'), quality=None, **fields):
        return MillOutput.objects.create(
            order=order,
            recd_date=fields.pop('recd_date', date.today()),
            mill_bill_no=fields.pop('mill_bill_no', f'MB-{TestDataFactory.random_string(4)}'),
            finished_mtr=finished_mtr,
            mill_rate=mill_rate,
            quality=quality,
            **fields
        )

    @staticmethod
    def create_dispatch(order, finish_mtr=Decimal('400.00'), sale_rate=Decimal('20.00'), **fields):
        return Dispatch.objects.create(
            order=order,
            dispatch_date=fields.pop('dispatch_date', date.today()),
            bill_no=fields.pop('bill_no', f'B-{TestDataFactory.random_string(4)}'),
            finish_mtr=finish_mtr,
            sale_rate=sale_rate,
            **fields
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()


class PanelTestCase(TestCase):
    """TestCase with an authenticated client and an empty list cache"""

    def setUp(self):
        cache.clear()
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
