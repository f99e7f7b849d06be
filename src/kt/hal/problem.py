"""\
Definition of a convenient :class:`~kt.hal.interfaces.IApiProblem`
implementation, and adapters from the exceptions raised by this package.

"""

import collections.abc
import traceback
import typing

import werkzeug.http
import zope.component
import zope.interface
import zope.schema.interfaces

import kt.hal.interfaces


def _validation_messages(messages):
    if messages is None:
        return None
    if isinstance(messages, collections.abc.Mapping):
        messages = [dict(field=field, message=message)
                    for field, message in messages.items()]
    result = []
    for message in messages:
        if (not isinstance(message, collections.abc.Mapping)
                or 'field' not in message or 'message' not in message):
            raise kt.hal.interfaces.InvalidArgumentError(
                f'validation messages must provide "field" and "message";'
                f' received {message!r}')
        result.append(dict(field=message['field'],
                           message=message['message']))
    return result


@zope.interface.implementer(kt.hal.interfaces.IApiProblem)
class ApiProblem:
    """Representation of a single API problem."""

    def __init__(self,
                 status: int,
                 detail: typing.Union[str, BaseException],
                 type: str = 'about:blank',
                 title: typing.Optional[str] = None,
                 validation_messages: typing.Optional[typing.Iterable] = None,
                 additional: typing.Optional[dict] = None):
        """Initialize problem structure.

        :param status:
            HTTP response status code.  Values that are not error
            statuses (400 through 599) are replaced with 500.
        :param detail:
            Human-oriented description of the problem; may contain
            instance-specific details.  If an exception is passed, its
            message is used as the detail and its traceback is retained
            for :attr:`detail_includes_stack_trace`.
        :param type:
            URI identifying the general kind of problem.
        :param title:
            Human-oriented high-level description of the kind of
            problem.  Derived from *status* if omitted.
        :param validation_messages:
            Sequence of mappings with ``field`` and ``message`` members,
            or a mapping from field names to messages.
        :param additional:
            Mapping providing non-standard fields that should be added
            to the payload.  These cannot replace standard fields.

        """
        self.exception = None
        if isinstance(detail, BaseException):
            self.exception = detail
            detail = str(detail) or detail.__class__.__name__
        try:
            kt.hal.interfaces.IApiProblem['status'].validate(status)
        except zope.schema.interfaces.ValidationError:
            status = 500
        try:
            kt.hal.interfaces.IApiProblem['type'].validate(type)
        except zope.schema.interfaces.ValidationError as e:
            raise kt.hal.interfaces.InvalidArgumentError(
                f'problem type must be a URI; received {type!r}') from e
        self.status = status
        self.detail = detail
        self.type = type
        self.title = title or werkzeug.http.HTTP_STATUS_CODES.get(
            status, 'Unknown Error')
        self.validation_messages = _validation_messages(validation_messages)
        self.detail_includes_stack_trace = False
        self._additional = dict(additional or {})

    def __repr__(self):
        return f'<{self.__class__.__name__} {self.status} {self.title!r}>'

    def set_detail_includes_stack_trace(self, flag):
        self.detail_includes_stack_trace = bool(flag)
        return self

    def stack_trace(self):
        """Return the traceback of the exception as a list of lines.

        Returns an empty list if the problem was not created from an
        exception.

        """
        exc = self.exception
        if exc is None:
            return []
        lines = traceback.format_exception(type(exc), exc, exc.__traceback__)
        return ''.join(lines).splitlines()

    def to_payload(self):
        r = dict(
            status=self.status,
            title=self.title,
            detail=self.detail,
            type=self.type,
        )
        if self.validation_messages:
            r['validation_messages'] = [dict(message)
                                        for message in self.validation_messages]
        if self.detail_includes_stack_trace and self.exception is not None:
            r['trace'] = self.stack_trace()
        for name, value in self._additional.items():
            r.setdefault(name, value)
        return r


@zope.component.adapter(kt.hal.interfaces.IRenderingError)
@zope.interface.implementer(kt.hal.interfaces.IApiProblem)
def renderingProblem(exc):
    """Adapt rendering exception to an
    :class:`~kt.hal.interfaces.IApiProblem`.

    :param exc: Exception object to adapt.

    """
    return ApiProblem(
        500,
        exc,
        title=exc.__doc__.strip() or None,
        additional=dict(rendering_error=exc.kind),
    )


@zope.component.adapter(kt.hal.interfaces.IRouteAssemblyError)
@zope.interface.implementer(kt.hal.interfaces.IApiProblem)
def routeAssemblyProblem(exc):
    """Adapt route assembly exception to an
    :class:`~kt.hal.interfaces.IApiProblem`.

    :param exc: Exception object to adapt.

    """
    return ApiProblem(
        500,
        exc,
        title=exc.__doc__.strip() or None,
        additional=dict(rendering_error=exc.kind, route=exc.route),
    )


@zope.component.adapter(kt.hal.interfaces.IPageOutOfRange)
@zope.interface.implementer(kt.hal.interfaces.IApiProblem)
def pageOutOfRangeProblem(exc):
    """Adapt page range exception to an
    :class:`~kt.hal.interfaces.IApiProblem`.

    :param exc: Exception object to adapt.

    """
    return ApiProblem(
        409,
        exc,
        title=exc.__doc__.strip() or None,
        additional=dict(page=exc.page, page_count=exc.page_count),
    )


@zope.component.adapter(kt.hal.interfaces.IInvalidArgumentError)
@zope.interface.implementer(kt.hal.interfaces.IApiProblem)
def invalidArgumentProblem(exc):
    """Adapt invalid argument exception to an
    :class:`~kt.hal.interfaces.IApiProblem`.

    :param exc: Exception object to adapt.

    """
    return ApiProblem(500, exc, title=exc.__doc__.strip() or None)


@zope.component.adapter(kt.hal.interfaces.IDomainError)
@zope.interface.implementer(kt.hal.interfaces.IApiProblem)
def domainProblem(exc):
    """Adapt domain exception to an
    :class:`~kt.hal.interfaces.IApiProblem`.

    :param exc: Exception object to adapt.

    """
    return ApiProblem(500, exc, title=exc.__doc__.strip() or None)


ADAPTERS = (
    renderingProblem,
    routeAssemblyProblem,
    pageOutOfRangeProblem,
    invalidArgumentProblem,
    domainProblem,
)


def register_adapters(registry=None):
    """Register the exception adapters defined here.

    The adapters are registered with *registry*, or the global
    component registry if not specified.

    """
    if registry is None:
        registry = zope.component.getGlobalSiteManager()
    for factory in ADAPTERS:
        registry.registerAdapter(factory)


def unregister_adapters(registry=None):
    """Remove the adapters registered by :func:`register_adapters`."""
    if registry is None:
        registry = zope.component.getGlobalSiteManager()
    for factory in ADAPTERS:
        registry.unregisterAdapter(factory)
