"""\
Rendering of view models to HAL+JSON or API problem documents.

"""

import enum
import json
import logging
import re

import flask.json.provider
import zope.interface

import kt.hal.interfaces


logger = logging.getLogger(__name__)

# An escaped slash is a backslash-slash pair not itself escaped, i.e.
# preceded by an even number of backslashes.
_rx_escaped_slash = re.compile(r'(?<!\\)((?:\\\\)*)\\/')


def unescape_slashes(text):
    """Replace escaped forward slashes in JSON *text* with plain slashes.

    Escaped backslashes are left alone, so ``"a\\\\/b"`` is not
    modified.  Applying this more than once has no further effect.

    """
    return _rx_escaped_slash.sub(r'\1/', text)


@zope.interface.implementer(kt.hal.interfaces.ISerializer)
class JSONSerializer:
    """Compact JSON encoding that escapes forward slashes.

    Values the :mod:`json` module cannot handle are passed to *default*,
    which defaults to the conversions Flask applies (dates, UUIDs,
    dataclasses, decimals).

    """

    def __init__(self, default=None, escape_slashes=True):
        self.default = default or flask.json.provider.DefaultJSONProvider.default
        self.escape_slashes = escape_slashes

    def serialize(self, value):
        text = json.dumps(value, default=self.default, separators=(',', ':'))
        if self.escape_slashes:
            # Forward slashes only appear within JSON strings.
            text = text.replace('/', '\\/')
        return text


class PayloadKind(enum.Enum):

    PROBLEM = 'problem'
    RESOURCE = 'resource'
    COLLECTION = 'collection'
    RAW = 'raw'


def _payload_kind(payload):
    if kt.hal.interfaces.IApiProblem.providedBy(payload):
        return PayloadKind.PROBLEM
    if kt.hal.interfaces.IHalResource.providedBy(payload):
        return PayloadKind.RESOURCE
    if kt.hal.interfaces.IHalCollection.providedBy(payload):
        return PayloadKind.COLLECTION
    return PayloadKind.RAW


class Model:
    """View model wrapping the payload of a response.

    The kind of payload is determined once, when the model is created.

    """

    def __init__(self, payload):
        self.payload = payload
        self.kind = _payload_kind(payload)

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.kind.value}>'

    def is_api_problem(self):
        return self.kind is PayloadKind.PROBLEM

    def is_hal_resource(self):
        return self.kind is PayloadKind.RESOURCE

    def is_hal_collection(self):
        return self.kind is PayloadKind.COLLECTION


class DocumentRenderer:
    """Render :class:`Model` instances as HAL+JSON or API problem text.

    Values that are not models are serialized as they are.  The output
    of every rendering path has escaped forward slashes replaced with
    plain slashes.

    The renderer remembers the API problem rendered by the most recent
    call to :meth:`render`, so a renderer instance should be used for
    only one request at a time.

    """

    def __init__(self, link_renderer, serializer=None,
                 display_exceptions=False):
        """Initialize renderer.

        :param link_renderer:
            :class:`~kt.hal.renderer.LinkRenderer` used to transform
            resources and collections.
        :param serializer:
            :class:`~kt.hal.interfaces.ISerializer` used to generate
            text; defaults to :class:`JSONSerializer`.
        :param display_exceptions:
            Indicates whether API problems created from exceptions
            include the stack trace.

        """
        self.link_renderer = link_renderer
        if serializer is None:
            serializer = JSONSerializer()
        self.serializer = kt.hal.interfaces.ISerializer(serializer)
        self.display_exceptions = bool(display_exceptions)
        self._api_problem = None

    def set_display_exceptions(self, flag):
        self.display_exceptions = bool(flag)
        return self

    def is_api_problem(self):
        """Return true if the last rendered document was an API problem."""
        return self._api_problem is not None

    def get_api_problem(self):
        """Return the last rendered API problem, or None."""
        return self._api_problem

    def render(self, value):
        """Render *value* to text.

        Errors raised while transforming resources or collections are
        propagated to the caller.

        """
        self._api_problem = None

        if not isinstance(value, Model):
            return self._serialize(value)

        kind = value.kind
        if kind is PayloadKind.PROBLEM:
            return self.render_api_problem(value.payload)
        elif kind is PayloadKind.RESOURCE:
            payload = self.link_renderer.render_resource(value.payload)
        elif kind is PayloadKind.COLLECTION:
            payload = self.link_renderer.render_collection(value.payload)
            if kt.hal.interfaces.IApiProblem.providedBy(payload):
                return self.render_api_problem(payload)
        elif kind is PayloadKind.RAW:
            payload = value.payload
        else:
            raise ValueError(f'unsupported payload kind: {kind!r}')
        return self._serialize(payload)

    def render_api_problem(self, problem):
        """Render an API problem, remembering it for
        :meth:`get_api_problem`.

        The stack trace is included only if exceptions are displayed.

        """
        problem = kt.hal.interfaces.IApiProblem(problem)
        self._api_problem = problem
        if self.display_exceptions:
            problem.detail_includes_stack_trace = True
        payload = dict(problem.to_payload())
        if not self.display_exceptions:
            payload.pop('trace', None)
        logger.debug('rendering API problem %s %r',
                     problem.status, problem.title)
        return self._serialize(payload)

    def _serialize(self, payload):
        return unescape_slashes(self.serializer.serialize(payload))
