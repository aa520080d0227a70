from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase
from django.test import TestCase

from lounge.testing import authenticate, make_user
from lounge.tokens import decode_token
from .models import User
from .roles import ROLE_PERMISSIONS, discount_permissions, permissions_for_role


class RolePermissionTests(TestCase):
    """Default permission bundles per role"""

    def test_bundle_is_a_copy(self):
        """Test each call hands out an independent permission bundle"""
        bundle = permissions_for_role('Manager')
        bundle['special_permissions']['discounts']['max_discount'] = 99
        self.assertEqual(ROLE_PERMISSIONS['Manager']['special_permissions']['discounts']['max_discount'], 15)

    def test_discount_limits(self):
        """Test max discount per role"""
        self.assertEqual(discount_permissions(permissions_for_role('Admin'))['max_discount'], 25)
        self.assertEqual(discount_permissions(permissions_for_role('Manager'))['max_discount'], 15)
        self.assertFalse(discount_permissions(permissions_for_role('Staff'))['bill'])

    def test_unknown_role_gets_user_bundle(self):
        """Test unknown roles fall back to the customer bundle"""
        self.assertEqual(permissions_for_role('Nobody'), ROLE_PERMISSIONS['User'])


class AuthAPITests(APITestCase):
    def setUp(self):
        self.register_url = reverse('register')
        self.login_url = reverse('login')
        self.payload = {
            'name': 'Asha Rao',
            'username': 'asha',
            'email': 'asha@example.com',
            'password': 'secret',
            'phone': '9800000000',
            'role': 'Staff',
        }

    def test_register_returns_token_and_assigns_bundle(self):
        """Test registration issues a token and stores the role bundle"""
        response = self.client.post(self.register_url, self.payload, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        claims = decode_token(response.data['data']['token'])
        user = User.objects.get(email='asha@example.com')
        self.assertEqual(claims['id'], user.id)
        self.assertEqual(claims['role'], 'Staff')
        self.assertEqual(user.permissions, permissions_for_role('Staff'))
        self.assertNotEqual(user.password, 'secret')

    def test_duplicate_email_rejected_even_with_new_username(self):
        """Test duplicate email is refused whatever the username"""
        self.client.post(self.register_url, self.payload, format='json')
        second = dict(self.payload, username='someone_else')

        response = self.client.post(self.register_url, second, format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data['success'])
        self.assertEqual(User.objects.filter(email='asha@example.com').count(), 1)

    def test_register_validation_errors_are_listed_per_field(self):
        """Test validation errors come back as a field list"""
        response = self.client.post(self.register_url, dict(self.payload, name='A', email='nope'), format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Validation failed')
        fields = {error['field'] for error in response.data['errors']}
        self.assertEqual(fields, {'name', 'email'})

    def test_login_checks_role(self):
        """Test login matches email, password and role together"""
        self.client.post(self.register_url, self.payload, format='json')

        wrong_role = self.client.post(self.login_url, {'email': 'asha@example.com', 'password': 'secret',
                                                       'role': 'Manager'}, format='json')
        wrong_password = self.client.post(self.login_url, {'email': 'asha@example.com', 'password': 'nope',
                                                           'role': 'Staff'}, format='json')
        ok = self.client.post(self.login_url, {'email': 'asha@example.com', 'password': 'secret',
                                               'role': 'Staff'}, format='json')

        self.assertEqual(wrong_role.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(wrong_password.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(ok.status_code, status.HTTP_200_OK)
        self.assertIn('permissions', ok.data['data']['user'])
        self.assertIsNotNone(User.objects.get(email='asha@example.com').last_login)

    def test_me_requires_token(self):
        """Test the profile endpoint needs a bearer token"""
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

        user = make_user('Manager')
        authenticate(self.client, user)
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['user']['username'], user.username)

    def test_garbage_token_is_rejected(self):
        """Test an undecodable token gives 401"""
        self.client.defaults['HTTP_AUTHORIZATION'] = 'Bearer not-a-token'
        response = self.client.get(reverse('me'))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['message'], 'Token is not valid')

    def test_username_is_trimmed(self):
        """Test surrounding whitespace is stripped from the username"""
        response = self.client.post(self.register_url, dict(self.payload, username='  asha  '), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(email='asha@example.com').username, 'asha')

        duplicate = dict(self.payload, email='other@example.com', username=' asha ')
        response = self.client.post(self.register_url, duplicate, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class StaffAPITests(APITestCase):
    def setUp(self):
        self.admin = make_user('Admin')
        authenticate(self.client, self.admin)

    def test_create_staff_gets_role_bundle(self):
        """Test new staff get the bundle of their role"""
        data = {'name': 'Kiran', 'username': 'kiran', 'email': 'kiran@example.com',
                'password': 'secret', 'phone': '9811111111', 'role': 'Manager'}
        response = self.client.post(reverse('staff_list'), data, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(username='kiran').permissions, permissions_for_role('Manager'))

    def test_staff_cannot_manage_staff(self):
        """Test staff management is admin only"""
        authenticate(self.client, make_user('Staff'))
        response = self.client.get(reverse('staff_list'))
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['message'], 'Access denied. Insufficient permissions.')

    def test_admin_permissions_are_locked(self):
        """Test admin accounts cannot be edited or removed"""
        other_admin = make_user('Admin')
        url = reverse('staff_permissions', kwargs={'pk': other_admin.pk})
        response = self.client.put(url, {'permissions': {}}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        response = self.client.delete(reverse('staff_detail', kwargs={'pk': other_admin.pk}))
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_delete_staff_is_soft(self):
        """Test deleting staff only deactivates them"""
        staff = make_user('Staff')
        response = self.client.delete(reverse('staff_detail', kwargs={'pk': staff.pk}))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        staff.refresh_from_db()
        self.assertFalse(staff.is_active)

    def test_malformed_permission_bundle_rejected(self):
        """Test badly shaped permission bundles are refused"""
        staff = make_user('Staff')
        url = reverse('staff_permissions', kwargs={'pk': staff.pk})

        for bundle in (
            {'special_permissions': 'all'},
            {'special_permissions': {'discounts': {'item': True, 'max_discount': 'lots'}}},
            {'special_permissions': {'discounts': {'bill': True, 'max_discount': 150}}},
            {'billing_access': {'generate': 'sometimes'}},
        ):
            response = self.client.put(url, {'permissions': bundle}, format='json')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST, bundle)

        staff.refresh_from_db()
        self.assertEqual(staff.permissions, permissions_for_role('Staff'))

    def test_permission_update_grants_discount_rights(self):
        """Test a replaced bundle drives discount rights"""
        staff = make_user('Staff')
        bundle = permissions_for_role('Staff')
        bundle['special_permissions']['discounts'].update({'item': True, 'max_discount': '12.5'})

        response = self.client.put(reverse('staff_permissions', kwargs={'pk': staff.pk}),
                                   {'permissions': bundle}, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        staff.refresh_from_db()
        rights = discount_permissions(staff.permissions)
        self.assertTrue(rights['item'])
        self.assertEqual(rights['max_discount'], 12.5)
        self.assertEqual(staff.permissions['tables_management'], bundle['tables_management'])
