"""\
Implementation of HAL link objects and collections of links.

"""

import collections.abc

import zope.interface
import zope.schema.interfaces

import kt.hal.interfaces


def _mapping(value, what):
    if isinstance(value, collections.abc.Mapping):
        return dict(value)
    raise kt.hal.interfaces.InvalidArgumentError(
        f'{what} expects a mapping; received {type(value).__name__!r}')


def _optional_text(value, what):
    if value is None or (isinstance(value, str) and value):
        return value
    raise kt.hal.interfaces.InvalidArgumentError(
        f'{what} must be a non-empty string or None; received {value!r}')


@zope.interface.implementer(kt.hal.interfaces.ILink)
class Link:
    """Utility object representing a HAL link.

    A link is created for a relation and then targeted at either an
    explicit URL (:meth:`set_url`) or a route (:meth:`set_route`).
    Whichever is set first decides the kind of link for its entire life;
    attempting to set the other raises
    :exc:`~kt.hal.interfaces.DomainError`.

    """

    def __init__(self, relation):
        """Initialize link for a relation.

        :param relation:
            Name of the relation, such as ``'self'`` or ``'next'``.
            Must be a non-empty string.

        """
        if not isinstance(relation, str) or not relation:
            raise kt.hal.interfaces.InvalidArgumentError(
                f'link relation must be a non-empty string;'
                f' received {relation!r}')
        self._relation = relation
        self._url = None
        self._route = None
        self._route_params = {}
        self._route_options = {}
        self._templated = None
        self._title = None
        self._hreflang = None

    def __repr__(self):
        target = (f'url={self._url!r}' if self._url is not None
                  else f'route={self._route!r}')
        return f'<{self.__class__.__name__} {self._relation!r} {target}>'

    @classmethod
    def from_mapping(cls, spec):
        """Create a complete link from a mapping.

        The mapping must provide ``rel`` and exactly one of ``url`` or
        ``route``.  The route may be given as a name, or as a mapping
        with ``name`` and optional ``params`` and ``options`` members.
        The optional ``templated``, ``title`` and ``hreflang`` members
        are applied as well.

        """
        spec = _mapping(spec, 'link specification')
        if 'rel' not in spec:
            raise kt.hal.interfaces.InvalidArgumentError(
                'link specification requires a "rel" member')
        route = spec.get('route')
        params = options = None
        if isinstance(route, collections.abc.Mapping):
            if 'name' not in route:
                raise kt.hal.interfaces.InvalidArgumentError(
                    'route specification requires a "name" member')
            params = route.get('params')
            options = route.get('options')
            route = route['name']
        return link(
            spec['rel'],
            url=spec.get('url'),
            route=route,
            params=params,
            options=options,
            templated=spec.get('templated'),
            title=spec.get('title'),
            hreflang=spec.get('hreflang'),
        )

    @property
    def relation(self):
        return self._relation

    @property
    def url(self):
        return self._url

    @property
    def route(self):
        return self._route

    @property
    def route_params(self):
        return dict(self._route_params)

    @property
    def route_options(self):
        return dict(self._route_options)

    @property
    def templated(self):
        return self._templated

    @templated.setter
    def templated(self, value):
        if value is not None and not isinstance(value, bool):
            raise kt.hal.interfaces.InvalidArgumentError(
                f'templated must be True, False, or None; received {value!r}')
        self._templated = value

    @property
    def title(self):
        return self._title

    @title.setter
    def title(self, value):
        self._title = _optional_text(value, 'title')

    @property
    def hreflang(self):
        return self._hreflang

    @hreflang.setter
    def hreflang(self, value):
        self._hreflang = _optional_text(value, 'hreflang')

    def set_templated(self, templated):
        self.templated = templated
        return self

    def set_title(self, title):
        self.title = title
        return self

    def set_hreflang(self, hreflang):
        self.hreflang = hreflang
        return self

    def set_url(self, url):
        """Set an explicit URL for the link.

        The URL may be absolute or relative.  Raises
        :exc:`~kt.hal.interfaces.InvalidArgumentError` if *url* is not
        syntactically valid.

        """
        if self.has_route():
            raise kt.hal.interfaces.DomainError(
                f'{self.__class__.__name__} already has a route set;'
                f' cannot set URL')
        if url is None:
            raise kt.hal.interfaces.InvalidArgumentError(
                'received invalid URL: None')
        field = kt.hal.interfaces.ILink['url']
        try:
            field.validate(url)
        except zope.schema.interfaces.ValidationError as e:
            raise kt.hal.interfaces.InvalidArgumentError(
                f'received invalid URL: {url!r}') from e
        self._url = url
        return self

    def set_route(self, route, params=None, options=None):
        """Set the route used to generate the link URL.

        If *params* or *options* are passed, they are passed along to
        route assembly.

        """
        if self.has_url():
            raise kt.hal.interfaces.DomainError(
                f'{self.__class__.__name__} already has a URL set;'
                f' cannot set route')
        if not isinstance(route, str) or not route:
            raise kt.hal.interfaces.InvalidArgumentError(
                f'route must be a non-empty string; received {route!r}')
        params = _mapping(params or {}, 'set_route')
        options = _mapping(options or {}, 'set_route')
        self._route = route
        self._route_params = params
        self._route_options = options
        return self

    def set_route_params(self, params):
        """Set route assembly parameters."""
        self._route_params = _mapping(params, 'set_route_params')
        return self

    def set_route_options(self, options):
        """Set route assembly options."""
        self._route_options = _mapping(options, 'set_route_options')
        return self

    def has_url(self):
        return bool(self._url)

    def has_route(self):
        return bool(self._route)

    def is_complete(self):
        return self.has_url() or self.has_route()


def link(relation, url=None, route=None, params=None, options=None,
         templated=None, title=None, hreflang=None):
    """Build a complete :class:`Link` in a single step.

    Exactly one of *url* or *route* must be provided; *params* and
    *options* apply only to route-based links.  Violations raise
    :exc:`~kt.hal.interfaces.DomainError`.

    """
    if (url is None) == (route is None):
        raise kt.hal.interfaces.DomainError(
            f'link {relation!r} requires exactly one of url or route')
    ob = Link(relation)
    if url is not None:
        if params or options:
            raise kt.hal.interfaces.DomainError(
                f'link {relation!r} has a URL; route parameters and'
                f' options are not allowed')
        ob.set_url(url)
    else:
        ob.set_route(route, params, options)
    ob.templated = templated
    ob.title = title
    ob.hreflang = hreflang
    return ob


@zope.interface.implementer(kt.hal.interfaces.ILinkCollection)
class LinkCollection:
    """Ordered collection of links, keyed by relation.

    Relations keep the order in which they were first added, and links
    for a single relation keep the order in which they were added.

    """

    def __init__(self, links=()):
        self._links = {}
        for lynk in links:
            self.add(lynk)

    def __contains__(self, relation):
        return relation in self._links

    def __iter__(self):
        return iter(list(self._links))

    def __len__(self):
        return len(self._links)

    def add(self, link, overwrite=False):
        link = kt.hal.interfaces.ILink(link)
        relation = link.relation
        if overwrite or relation not in self._links:
            self._links[relation] = [link]
        else:
            self._links[relation].append(link)
        return self

    def get(self, relation, default=None):
        links = self._links.get(relation)
        if not links:
            return default
        if len(links) == 1:
            return links[0]
        return list(links)

    def has(self, relation):
        return relation in self._links

    def remove(self, relation):
        """Remove all links for *relation*.

        Returns true if there were links to remove.

        """
        return self._links.pop(relation, None) is not None

    def items(self):
        for relation, links in self._links.items():
            yield relation, list(links)
