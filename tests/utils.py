"""\
Tests support for kt.hal tests.

"""

import unittest

import flask
import flask_restful
import zope.component

import kt.hal.api
import kt.hal.problem


class HALTestCase(unittest.TestCase):

    def setUp(self):
        super(HALTestCase, self).setUp()
        self.app = flask.Flask(__name__)
        self.app.config['PROPAGATE_EXCEPTIONS'] = True
        self.app.config['TESTING'] = True
        self.api = flask_restful.Api(self.app, catch_all_404s=True)
        self.client = self.app.test_client()

    def request_context(self, *args, **kwargs):
        return self.app.test_request_context(*args, **kwargs)

    def register_adapters(self):
        registry = zope.component.getGlobalSiteManager()
        kt.hal.problem.register_adapters(registry)
        self.addCleanup(kt.hal.problem.unregister_adapters, registry)

    def http_get(self, path, status=200):
        response = self.client.get(path)
        if status:
            self.assertEqual(
                response.status_code, status,
                f'GET {path} status {response.status_code}, expected {status}')
        return response
