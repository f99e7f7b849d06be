"""\
Top-level API to construct HAL responses in Flask applications.

"""

import logging

import flask
import werkzeug.datastructures
import werkzeug.routing
import zope.interface

import kt.hal.interfaces
import kt.hal.problem
import kt.hal.renderer
import kt.hal.view


logger = logging.getLogger(__name__)

CONTENT_TYPE = 'application/hal+json'
"""Media type associated with HAL payloads."""

PROBLEM_CONTENT_TYPE = 'application/problem+json'
"""Media type associated with API problem payloads."""

JSON_CONTENT_TYPE = 'application/json'
"""Media type for payloads that are neither HAL nor API problems."""


@zope.interface.implementer(kt.hal.interfaces.IUrlBuilder)
class FlaskUrlBuilder:
    """Assemble URLs for Flask endpoints using :func:`flask.url_for`.

    Route parameters are passed as values for the endpoint; values not
    used by the URL rule become query parameters.  Supported route
    options:

    ``query``
        Mapping of additional query parameters.
    ``force_canonical``
        Generate an absolute URL.
    ``fragment``
        Fragment identifier appended to the URL.
    ``scheme``
        Scheme for an absolute URL; implies ``force_canonical``.

    """

    _options = frozenset(('query', 'force_canonical', 'fragment', 'scheme'))

    def assemble(self, route, params, options):
        options = dict(options or {})
        unknown = set(options) - self._options
        if unknown:
            raise kt.hal.interfaces.RouteAssemblyError(
                f'unsupported route options for {route!r}:'
                f' {", ".join(sorted(unknown))}',
                route=route, params=params)
        values = dict(options.get('query') or {})
        values.update(params or {})
        if options.get('force_canonical') or options.get('scheme'):
            values['_external'] = True
        if options.get('scheme'):
            values['_scheme'] = options['scheme']
        if options.get('fragment'):
            values['_anchor'] = options['fragment']
        try:
            return flask.url_for(route, **values)
        except werkzeug.routing.BuildError as e:
            raise kt.hal.interfaces.RouteAssemblyError(
                str(e), route=route, params=params) from e


@zope.interface.implementer(kt.hal.interfaces.IServerUrl)
class FlaskServerUrl:
    """Host URL of the current Flask request."""

    def current_host_url(self):
        return flask.request.host_url.rstrip('/')


def create_renderer(app):
    """Create a document renderer configured from *app*.

    Configuration settings used:

    ``KT_HAL_DISPLAY_EXCEPTIONS``
        Include stack traces in API problems created from exceptions.
        Defaults to the debug setting of the application.
    ``KT_HAL_ABSOLUTE_URLS``
        Make URLs assembled from routes absolute using the host URL of
        the request.  Defaults to false.
    ``KT_HAL_RENDER_EMPTY``
        Render empty ``_links`` and ``_embedded`` members for resources.
        Defaults to false.

    """
    config = app.config
    server_url = FlaskServerUrl() if config.get('KT_HAL_ABSOLUTE_URLS') else None
    link_renderer = kt.hal.renderer.LinkRenderer(
        FlaskUrlBuilder(), server_url,
        render_empty=bool(config.get('KT_HAL_RENDER_EMPTY', False)))
    serializer = kt.hal.view.JSONSerializer(
        default=getattr(app.json, 'default', None))
    return kt.hal.view.DocumentRenderer(
        link_renderer,
        serializer=serializer,
        display_exceptions=config.get('KT_HAL_DISPLAY_EXCEPTIONS', app.debug))


def renderer():
    """Get HAL document renderer for current Flask request.

    A new renderer will be created if needed.  At most one renderer will
    be associated with each request, so the API problem recorded by the
    renderer is never shared between requests.

    If the ``'KT_HAL_RENDERER'`` setting is specified in
    ``flask.current_app.config``, it should be a factory accepting the
    application and returning a
    :class:`~kt.hal.view.DocumentRenderer`.  Otherwise
    :func:`create_renderer` is used.

    """
    try:
        return flask.g.__hal_renderer
    except AttributeError:
        # pass & fall through to avoid the confusing chained exception
        # when things go wrong building the renderer.
        pass
    config = flask.current_app.config
    factory = config.get('KT_HAL_RENDERER', create_renderer)
    r = factory(flask.current_app._get_current_object())
    flask.g.__hal_renderer = r
    return r


def response(payload, status=None, headers=None):
    """Generate response from a HAL resource, collection, or API problem.

    If *headers* is given and non-``None``, it must be be mapping of
    additional headers that should be returned in the request.  If a
    **Content-Type** header is provided, it will be used instead of the
    default value for the kind of payload.

    Collections for which the requested page is not available generate
    an API problem response.  Rendering errors that can be adapted to
    :class:`~kt.hal.interfaces.IApiProblem` generate an API problem
    response; others are propagated.

    """
    model = payload
    if not isinstance(model, kt.hal.view.Model):
        model = kt.hal.view.Model(payload)
    r = renderer()
    try:
        body = r.render(model)
    except kt.hal.interfaces.RenderingError as e:
        problem = kt.hal.interfaces.IApiProblem(e, None)
        if problem is None:
            raise
        logger.debug('converting rendering error to API problem: %s', e)
        return error(problem, headers=headers)
    if r.is_api_problem():
        return _response(body, r.get_api_problem().status, headers,
                         PROBLEM_CONTENT_TYPE)
    if model.kind is kt.hal.view.PayloadKind.RAW:
        content_type = JSON_CONTENT_TYPE
    else:
        content_type = CONTENT_TYPE
    return _response(body, status or 200, headers, content_type)


def error(error, headers=None):
    """Generate API problem response from a problem or exception.

    *error* must provide or be adaptable to
    :class:`~kt.hal.interfaces.IApiProblem`.

    """
    problem = kt.hal.interfaces.IApiProblem(error)
    r = renderer()
    body = r.render(kt.hal.view.Model(problem))
    return _response(body, problem.status, headers, PROBLEM_CONTENT_TYPE)


def init_app(app):
    """Register problem adapters and error handlers with *app*.

    Exceptions raised by this package while handling a request generate
    API problem responses.

    """
    kt.hal.problem.register_adapters()
    for exc in (kt.hal.interfaces.RenderingError,
                kt.hal.interfaces.InvalidArgumentError,
                kt.hal.interfaces.DomainError,
                kt.hal.interfaces.PageOutOfRange):
        app.register_error_handler(exc, error)


def _response(body, status, headers, content_type):
    hdrs = werkzeug.datastructures.Headers()
    if headers is not None:
        hdrs.extend(headers)
    if 'Content-Type' not in hdrs:
        hdrs['Content-Type'] = content_type
    return flask.make_response(body.encode('utf-8'), status, hdrs)
