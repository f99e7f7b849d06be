"""\
Tests for various internal functions that represent isolated functionality.

"""

import unittest

import kt.hal.interfaces
import kt.hal.link
import kt.hal.renderer
import tests.objects


class TestIsAbsolute(unittest.TestCase):

    def test_absolute(self):
        self.assertTrue(kt.hal.renderer._is_absolute('http://example.com/'))
        self.assertTrue(kt.hal.renderer._is_absolute('https://example.com'))
        self.assertTrue(kt.hal.renderer._is_absolute('//example.com/w'))

    def test_relative(self):
        self.assertFalse(kt.hal.renderer._is_absolute('/widgets/42'))
        self.assertFalse(kt.hal.renderer._is_absolute('widgets'))
        self.assertFalse(kt.hal.renderer._is_absolute('/go?to=http://x'))


class TestFields(unittest.TestCase):

    def test_mapping_is_copied(self):
        payload = dict(id=1)
        result = kt.hal.renderer.fields(payload)

        self.assertEqual(result, payload)
        self.assertIsNot(result, payload)

    def test_public_attributes(self):
        gadget = tests.objects.Gadget(3, 'red')

        self.assertEqual(kt.hal.renderer.fields(gadget),
                         dict(id=3, color='red'))

    def test_no_fields(self):
        with self.assertRaises(kt.hal.interfaces.RenderingError) as cm:
            kt.hal.renderer.fields(object())

        self.assertEqual(cm.exception.kind, 'payload')


class TestCheckReserved(unittest.TestCase):

    def test_reserved(self):
        for key in kt.hal.interfaces.RESERVED_KEYS:
            with self.subTest(key=key):
                with self.assertRaises(
                        kt.hal.interfaces.RenderingError) as cm:
                    kt.hal.renderer._check_reserved({key: 1}, 'payload')
                self.assertEqual(cm.exception.kind, 'reserved-key')
                self.assertIn(key, str(cm.exception))

    def test_other_keys(self):
        kt.hal.renderer._check_reserved(dict(links=1, embedded=2), 'payload')


class TestMapping(unittest.TestCase):

    def test_copy(self):
        params = dict(id=1)
        result = kt.hal.link._mapping(params, 'params')

        self.assertEqual(result, params)
        self.assertIsNot(result, params)

    def test_not_a_mapping(self):
        with self.assertRaises(kt.hal.interfaces.InvalidArgumentError):
            kt.hal.link._mapping([('id', 1)], 'params')
        with self.assertRaises(kt.hal.interfaces.InvalidArgumentError):
            kt.hal.link._mapping(None, 'params')
