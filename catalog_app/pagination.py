from rest_framework.utils.urls import remove_query_param, replace_query_param

PAGE_QUERY_PARAM = "page"


def with_links(request, pagination):
    """Add ``next``/``previous`` URLs to a listing pagination block."""
    url = request.build_absolute_uri()
    page = pagination["page"]

    next_link = None
    if pagination["has_next"]:
        next_link = replace_query_param(url, PAGE_QUERY_PARAM, page + 1)

    previous_link = None
    if pagination["has_prev"]:
        if page - 1 == 1:
            previous_link = remove_query_param(url, PAGE_QUERY_PARAM)
        else:
            previous_link = replace_query_param(url, PAGE_QUERY_PARAM, page - 1)

    return {**pagination, "next": next_link, "previous": previous_link}
