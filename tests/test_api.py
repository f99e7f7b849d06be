# (c) 2021.  Keeper Technology LLC.  All Rights Reserved.
# Use is subject to license.  Reproduction and distribution is strictly
# prohibited.
#
# Subject to the following third party software licenses and terms and
# conditions (including open source):  www.keepertech.com/thirdpartylicenses

"""\
Tests for kt.hal.api.

"""

import flask_restful
import werkzeug.routing

import kt.hal.api
import kt.hal.interfaces
import kt.hal.link
import kt.hal.problem
import kt.hal.renderer
import kt.hal.resource
import kt.hal.view
import tests.objects
import tests.utils


class RoutesTestCase(tests.utils.HALTestCase):

    def setUp(self):
        super(RoutesTestCase, self).setUp()

        class Widget(flask_restful.Resource):
            def get(inst, id):
                return kt.hal.api.response(
                    tests.objects.widget_resource(id))

        class Widgets(flask_restful.Resource):
            def get(inst):
                return kt.hal.api.response(self.payload, **self.kwargs)

        self.api.add_resource(Widget, '/widgets/<int:id>', endpoint='widget')
        self.api.add_resource(Widgets, '/widgets', endpoint='widgets')
        self.payload = None
        self.kwargs = {}


class FlaskUrlBuilderTestCase(RoutesTestCase):

    def setUp(self):
        super(FlaskUrlBuilderTestCase, self).setUp()
        self.builder = kt.hal.api.FlaskUrlBuilder()

    def assemble(self, route, params=None, options=None):
        with self.request_context('/'):
            return self.builder.assemble(route, params or {}, options or {})

    def test_route(self):
        self.assertTrue(
            kt.hal.interfaces.IUrlBuilder.providedBy(self.builder))
        self.assertEqual(self.assemble('widget', dict(id=42)), '/widgets/42')

    def test_extra_params_become_query(self):
        self.assertEqual(self.assemble('widgets', dict(page=2)),
                         '/widgets?page=2')

    def test_query_option(self):
        self.assertEqual(
            self.assemble('widgets', options=dict(query=dict(color='red'))),
            '/widgets?color=red')

    def test_fragment_option(self):
        self.assertEqual(
            self.assemble('widget', dict(id=42), dict(fragment='details')),
            '/widgets/42#details')

    def test_force_canonical_option(self):
        self.assertEqual(
            self.assemble('widget', dict(id=42), dict(force_canonical=True)),
            'http://localhost/widgets/42')

    def test_scheme_option(self):
        self.assertEqual(
            self.assemble('widget', dict(id=42), dict(scheme='https')),
            'https://localhost/widgets/42')

    def test_unknown_route(self):
        with self.assertRaises(kt.hal.interfaces.RouteAssemblyError) as cm:
            self.assemble('nowhere', dict(id=1))

        self.assertEqual(cm.exception.route, 'nowhere')
        self.assertEqual(cm.exception.params, dict(id=1))
        self.assertIsInstance(cm.exception.__cause__,
                              werkzeug.routing.BuildError)

    def test_missing_param(self):
        with self.assertRaises(kt.hal.interfaces.RouteAssemblyError):
            self.assemble('widget')

    def test_unknown_option(self):
        with self.assertRaises(kt.hal.interfaces.RouteAssemblyError) as cm:
            self.assemble('widget', dict(id=42), dict(absolute=True))

        self.assertIn('absolute', str(cm.exception))


class RendererTestCase(tests.utils.HALTestCase):

    def test_same_within_request(self):
        with self.request_context('/'):
            r1 = kt.hal.api.renderer()
            r2 = kt.hal.api.renderer()

        self.assertIsInstance(r1, kt.hal.view.DocumentRenderer)
        self.assertIs(r1, r2)

    def test_new_for_each_request(self):
        with self.request_context('/'):
            r1 = kt.hal.api.renderer()
        with self.request_context('/'):
            r2 = kt.hal.api.renderer()

        self.assertIsNot(r1, r2)

    def test_configuration_defaults(self):
        with self.request_context('/'):
            r = kt.hal.api.renderer()

        self.assertFalse(r.display_exceptions)
        self.assertIsNone(r.link_renderer.server_url)
        self.assertFalse(r.link_renderer.render_empty)
        self.assertIsInstance(r.link_renderer.url_builder,
                              kt.hal.api.FlaskUrlBuilder)

    def test_configuration(self):
        self.app.config['KT_HAL_DISPLAY_EXCEPTIONS'] = True
        self.app.config['KT_HAL_ABSOLUTE_URLS'] = True
        self.app.config['KT_HAL_RENDER_EMPTY'] = True

        with self.request_context('/'):
            r = kt.hal.api.renderer()

        self.assertTrue(r.display_exceptions)
        self.assertIsInstance(r.link_renderer.server_url,
                              kt.hal.api.FlaskServerUrl)
        self.assertTrue(r.link_renderer.render_empty)

    def test_renderer_factory(self):
        calls = []

        def factory(app):
            calls.append(app)
            return kt.hal.view.DocumentRenderer(
                kt.hal.renderer.LinkRenderer(tests.objects.StubUrlBuilder()))

        self.app.config['KT_HAL_RENDERER'] = factory

        with self.request_context('/'):
            r = kt.hal.api.renderer()
            kt.hal.api.renderer()

        self.assertEqual(calls, [self.app])
        self.assertIsInstance(r.link_renderer.url_builder,
                              tests.objects.StubUrlBuilder)


class ResponseTestCase(RoutesTestCase):

    def test_resource_response(self):
        resp = self.http_get('/widgets/42')

        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.CONTENT_TYPE)
        self.assertEqual(
            resp.get_data(as_text=True),
            '{"id":42,"name":"widget","_links":{"self":{"href":"/widgets/42"}}}')

    def test_absolute_urls(self):
        self.app.config['KT_HAL_ABSOLUTE_URLS'] = True

        resp = self.http_get('/widgets/42')

        self.assertEqual(resp.json['_links']['self'],
                         dict(href='http://localhost/widgets/42'))

    def test_status_and_headers(self):
        self.payload = tests.objects.widget_resource(7)
        self.kwargs = dict(status=201, headers={'Location': '/widgets/7'})

        resp = self.http_get('/widgets', status=201)

        self.assertEqual(resp.headers['Location'], '/widgets/7')
        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.CONTENT_TYPE)

    def test_content_type_override(self):
        self.payload = tests.objects.widget_resource(7)
        self.kwargs = dict(headers={'Content-Type': 'application/json'})

        resp = self.http_get('/widgets')

        self.assertEqual(resp.headers['Content-Type'], 'application/json')

    def test_raw_payload(self):
        self.payload = dict(path='/widgets/7')

        resp = self.http_get('/widgets')

        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.JSON_CONTENT_TYPE)
        self.assertEqual(resp.get_data(as_text=True),
                         '{"path":"/widgets/7"}')

    def test_collection_response(self):
        self.payload = kt.hal.resource.HalCollection(
            [dict(id=n) for n in range(1, 26)],
            collection_name='widgets', page=2, page_size=10,
            collection_route='widgets')

        resp = self.http_get('/widgets?page=2')

        content = resp.json
        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.CONTENT_TYPE)
        self.assertEqual(content['_links'], dict(
            self=dict(href='/widgets?page=2'),
            first=dict(href='/widgets?page=1'),
            last=dict(href='/widgets?page=3'),
            prev=dict(href='/widgets?page=1'),
            next=dict(href='/widgets?page=3'),
        ))
        self.assertEqual([w['id'] for w in content['_embedded']['widgets']],
                         list(range(11, 21)))
        self.assertEqual(content['page'], 2)
        self.assertEqual(content['page_count'], 3)
        self.assertEqual(content['page_size'], 10)
        self.assertEqual(content['total_items'], 25)

    def test_collection_page_out_of_range(self):
        self.payload = kt.hal.resource.HalCollection(
            [dict(id=n) for n in range(1, 26)],
            page=4, page_size=10, collection_route='widgets')

        resp = self.http_get('/widgets?page=4', status=409)

        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.PROBLEM_CONTENT_TYPE)
        content = resp.json
        self.assertEqual(content['status'], 409)
        self.assertEqual(content['page'], 4)
        self.assertEqual(content['page_count'], 3)

    def test_problem_response(self):
        self.payload = kt.hal.problem.ApiProblem(
            404, 'Widget 42 not found', title='Not Found')

        resp = self.http_get('/widgets', status=404)

        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.PROBLEM_CONTENT_TYPE)
        self.assertEqual(resp.json, dict(
            status=404,
            title='Not Found',
            detail='Widget 42 not found',
            type='about:blank',
        ))

    def test_problem_status_wins(self):
        self.payload = kt.hal.problem.ApiProblem(422, 'Invalid widget')
        self.kwargs = dict(status=200)

        self.http_get('/widgets', status=422)

    def test_rendering_error_becomes_problem(self):
        self.register_adapters()
        resource = tests.objects.widget_resource(7)
        resource.links.add(kt.hal.link.Link('broken'))
        self.payload = resource

        resp = self.http_get('/widgets', status=500)

        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.PROBLEM_CONTENT_TYPE)
        self.assertEqual(resp.json['rendering_error'], 'incomplete-link')
        self.assertNotIn('trace', resp.json)

    def test_route_assembly_error_becomes_problem(self):
        self.register_adapters()
        resource = kt.hal.resource.HalResource(dict(id=7), 7)
        resource.links.add(kt.hal.link.link(
            'self', route='nowhere', params=dict(id=7)))
        self.payload = resource

        resp = self.http_get('/widgets', status=500)

        self.assertEqual(resp.json['route'], 'nowhere')
        self.assertEqual(resp.json['rendering_error'], 'route-assembly')

    def test_rendering_error_without_adapters(self):
        resource = tests.objects.widget_resource(7)
        resource.links.add(kt.hal.link.Link('broken'))

        with self.request_context('/'):
            with self.assertRaises(kt.hal.interfaces.RenderingError):
                kt.hal.api.response(resource)


class ErrorResponseTestCase(tests.utils.HALTestCase):

    def setUp(self):
        super(ErrorResponseTestCase, self).setUp()
        self.headers = None

        class Render(flask_restful.Resource):
            def get(inst):
                try:
                    raise LookupError('Widget 42 not found')
                except LookupError as e:
                    problem = kt.hal.problem.ApiProblem(404, e)
                return kt.hal.api.error(problem, headers=self.headers)

        self.api.add_resource(Render, '/')

    def test_problem(self):
        self.headers = {'X-Widget': '42'}

        resp = self.http_get('/', status=404)

        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.PROBLEM_CONTENT_TYPE)
        self.assertEqual(resp.headers['X-Widget'], '42')
        self.assertEqual(resp.json['detail'], 'Widget 42 not found')
        self.assertNotIn('trace', resp.json)

    def test_problem_with_trace(self):
        self.app.config['KT_HAL_DISPLAY_EXCEPTIONS'] = True

        resp = self.http_get('/', status=404)

        self.assertEqual(resp.json['trace'][-1],
                         'LookupError: Widget 42 not found')

    def test_not_adaptable(self):
        with self.request_context('/'):
            with self.assertRaises(TypeError):
                kt.hal.api.error(KeyError('widget'))


class InitAppTestCase(tests.utils.HALTestCase):

    def setUp(self):
        super(InitAppTestCase, self).setUp()
        kt.hal.api.init_app(self.app)
        self.addCleanup(kt.hal.problem.unregister_adapters)

        def fail():
            raise self.exception

        self.app.add_url_rule('/fail', 'fail', fail)

    def test_domain_error(self):
        self.exception = kt.hal.interfaces.DomainError(
            'link already has a route')

        resp = self.http_get('/fail', status=500)

        self.assertEqual(resp.headers['Content-Type'],
                         kt.hal.api.PROBLEM_CONTENT_TYPE)
        self.assertEqual(resp.json['detail'], 'link already has a route')

    def test_page_out_of_range(self):
        self.exception = kt.hal.interfaces.PageOutOfRange(9, 2)

        resp = self.http_get('/fail', status=409)

        self.assertEqual(resp.json['page'], 9)

    def test_other_exceptions_propagate(self):
        self.exception = KeyError('widget')

        with self.assertRaises(KeyError):
            self.client.get('/fail')

    def test_rendering_error_with_flask_route(self):
        @self.app.route('/widgets/<int:id>', endpoint='widget')
        def widget(id):
            resource = kt.hal.resource.HalResource(dict(id=id), id)
            resource.links.add(kt.hal.link.link(
                'self', route='widget', params=dict(id=id)))
            resource.links.add(kt.hal.link.link(
                'up', route='widgets'))
            return kt.hal.api.response(resource)

        resp = self.http_get('/widgets/3', status=500)

        self.assertEqual(resp.json['route'], 'widgets')
