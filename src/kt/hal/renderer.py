"""\
Transformation of HAL resources and collections into JSON-friendly
Python structures.

URLs for route-based links are produced by an
:class:`~kt.hal.interfaces.IUrlBuilder`; the renderer itself has no
knowledge of the web framework.

"""

import collections.abc
import logging

import kt.hal.interfaces
import kt.hal.link
import kt.hal.problem


logger = logging.getLogger(__name__)


# Fields added to every rendered collection.
PAGE_KEYS = 'page', 'page_count', 'page_size', 'total_items'


def _is_absolute(href):
    # Scheme-relative references already name a host.
    if href.startswith('//'):
        return True
    scheme, sep, _ = href.partition('://')
    return bool(sep) and scheme.isalpha()


def fields(payload):
    """Return a new dictionary with the fields of *payload*.

    Mappings are copied.  Other objects are adapted to
    :class:`~kt.hal.interfaces.IFieldMapping` if possible; otherwise
    their public instance attributes are used.

    """
    if isinstance(payload, collections.abc.Mapping):
        return dict(payload)
    mapping = kt.hal.interfaces.IFieldMapping(payload, None)
    if mapping is not None:
        return dict(mapping)
    try:
        attrs = vars(payload)
    except TypeError:
        raise kt.hal.interfaces.RenderingError(
            f'cannot extract fields from {type(payload).__name__!r}',
            kind='payload')
    return {name: value for name, value in attrs.items()
            if not name.startswith('_')}


def _is_record(item):
    if isinstance(item, collections.abc.Mapping):
        return False
    if kt.hal.interfaces.IFieldMapping(item, None) is not None:
        return True
    return hasattr(item, '__dict__')


def _check_reserved(data, what, keys=kt.hal.interfaces.RESERVED_KEYS):
    for key in keys:
        if key in data:
            raise kt.hal.interfaces.RenderingError(
                f'{what} defines reserved key {key!r}',
                kind='reserved-key')


class LinkRenderer:
    """Render resources and collections as HAL structures.

    If *server_url* is provided, URLs assembled from routes which are
    not already absolute are made absolute using the host URL of the
    current request.  Explicit link URLs are never modified.

    Empty ``_links`` and ``_embedded`` members are omitted from
    resources unless *render_empty* is true.

    """

    def __init__(self, url_builder, server_url=None, render_empty=False):
        self.url_builder = kt.hal.interfaces.IUrlBuilder(url_builder)
        if server_url is not None:
            server_url = kt.hal.interfaces.IServerUrl(server_url)
        self.server_url = server_url
        self.render_empty = render_empty

    def href(self, link):
        """Return the target URL of *link*."""
        link = kt.hal.interfaces.ILink(link)
        if not link.is_complete():
            raise kt.hal.interfaces.RenderingError(
                f'link {link.relation!r} has neither a URL nor a route',
                kind='incomplete-link')
        if link.has_url():
            return link.url
        href = self.url_builder.assemble(
            link.route, link.route_params, link.route_options)
        logger.debug('assembled %r for route %r', href, link.route)
        if self.server_url is not None and not _is_absolute(href):
            host = self.server_url.current_host_url().rstrip('/')
            if not href.startswith('/'):
                href = '/' + href
            href = host + href
        return href

    def render_link(self, link):
        link = kt.hal.interfaces.ILink(link)
        d = dict(href=self.href(link))
        if link.templated is not None:
            d['templated'] = bool(link.templated)
        if link.title is not None:
            d['title'] = link.title
        if link.hreflang is not None:
            d['hreflang'] = link.hreflang
        return d

    def render_links(self, links):
        links = kt.hal.interfaces.ILinkCollection(links)
        r = dict()
        for relation, lynks in links.items():
            rendered = [self.render_link(lynk) for lynk in lynks]
            if len(rendered) == 1:
                r[relation] = rendered[0]
            else:
                r[relation] = rendered
        return r

    def render_resource(self, resource):
        """Return the HAL structure for *resource*.

        Embedded resources are rendered recursively.  A resource that
        embeds itself, directly or through other embedded resources,
        causes :exc:`~kt.hal.interfaces.RenderingError` to be raised.

        """
        resource = kt.hal.interfaces.IHalResource(resource)
        return self._render_resource(resource, ())

    def _render_resource(self, resource, path):
        if any(ob is resource for ob in path):
            raise kt.hal.interfaces.RenderingError(
                f'resource {resource.identifier!r} embeds itself',
                kind='embed-cycle')
        path = path + (resource,)

        r = fields(resource.payload)
        _check_reserved(r, f'payload of resource {resource.identifier!r}')

        d = self.render_links(resource.links)
        if d or self.render_empty:
            r['_links'] = d

        d = dict()
        for relation, embedded in resource.embedded.items():
            if isinstance(embedded, (list, tuple)):
                d[relation] = [
                    self._render_resource(
                        kt.hal.interfaces.IHalResource(ob), path)
                    for ob in embedded]
            else:
                d[relation] = self._render_resource(
                    kt.hal.interfaces.IHalResource(embedded), path)
        if d or self.render_empty:
            r['_embedded'] = d

        return r

    def render_collection(self, collection):
        """Return the HAL structure for *collection*.

        If the requested page is not available, an
        :class:`~kt.hal.problem.ApiProblem` is returned instead of the
        structure, since the page number is supplied by the client.

        Items that are neither resources nor records, such as strings
        or numbers, are embedded unchanged.

        """
        collection = kt.hal.interfaces.IHalCollection(collection)
        paginator = kt.hal.interfaces.IPaginator(collection.paginator())
        page = collection.page
        try:
            items = paginator.items(page)
        except kt.hal.interfaces.PageOutOfRange as e:
            logger.debug('rejecting collection page: %s', e)
            return kt.hal.problem.pageOutOfRangeProblem(e)

        links = kt.hal.link.LinkCollection()
        for relation, lynks in collection.links.items():
            for lynk in lynks:
                links.add(lynk)
        for lynk in self._navigation_links(collection, paginator):
            if lynk.relation == 'self' and 'self' in links:
                continue
            links.add(lynk)

        r = dict(collection.attributes)
        _check_reserved(r, 'collection attributes',
                        kt.hal.interfaces.RESERVED_KEYS + PAGE_KEYS)
        d = self.render_links(links)
        if d or self.render_empty:
            r['_links'] = d

        rendered = []
        for item in items:
            resource = kt.hal.interfaces.IHalResource(item, None)
            if resource is not None:
                rendered.append(self._render_resource(resource, ()))
            elif _is_record(item):
                rendered.append(fields(item))
            else:
                rendered.append(item)
        r['_embedded'] = {collection.collection_name: rendered}

        r['page'] = page
        r['page_count'] = paginator.page_count
        r['page_size'] = paginator.page_size or paginator.total_items
        r['total_items'] = paginator.total_items
        return r

    def _navigation_links(self, collection, paginator):
        route = collection.collection_route
        if not route:
            return []
        options = collection.collection_route_options

        def navlink(relation, page=None):
            params = dict(collection.collection_route_params)
            if page is not None:
                params['page'] = page
            return kt.hal.link.link(
                relation, route=route, params=params, options=options)

        if not collection.paginated:
            return [navlink('self')]

        page = collection.page
        count = paginator.page_count
        links = [navlink('self', page)]
        if count:
            links.append(navlink('first', 1))
            links.append(navlink('last', count))
            if page > 1:
                links.append(navlink('prev', page - 1))
            if page < count:
                links.append(navlink('next', page + 1))
        return links
