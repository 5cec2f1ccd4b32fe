"""Namespace indexing and overlap policy.

Purpose
-------
Group file sources by the namespace each one claims and decide what happens
when several files claim the same namespace. Both steps are pure; discovering
and parsing files is left to the composition root and the adapters.

Contents
    - ``index_namespaces``: ordered ``namespace -> [sources]`` mapping.
    - ``check_overlap``: strict/permissive policy for shared namespaces.
    - ``select_contributors``: one source per namespace, in index order.

System Role
-----------
:class:`lib_cmdb.core.Interface` runs ``index_namespaces`` →
``check_overlap`` → ``select_contributors`` during construction. The
development flag is passed in explicitly.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from ..domain.errors import ValueConflict
from ..observability import log_debug, log_warning, make_event
from .ports import NamespacedSource


def index_namespaces(sources: Iterable[NamespacedSource]) -> dict[str, list[NamespacedSource]]:
    """Group *sources* by namespace, preserving discovery order everywhere.

    Namespaces appear in the order their first contributor was discovered;
    each list keeps its contributors in discovery order.
    """

    namespaces: dict[str, list[NamespacedSource]] = {}
    for source in sources:
        namespaces.setdefault(source.namespace, []).append(source)
        log_debug("namespace_indexed", **make_event("file", source.path, {"namespace": source.namespace}))
    return namespaces


def check_overlap(namespaces: dict[str, list[NamespacedSource]], *, development: bool) -> None:
    """Reject or tolerate namespaces with more than one contributing file.

    Why
    ----
    A base-directory file silently shadowed by another file is a deployment
    error. During local development a ``./.cmdb`` override is expected, so the
    same condition is only reported.

    Raises
    ------
    ValueConflict
        In strict mode, for the first overlapping namespace.
    """

    for namespace, contributors in namespaces.items():
        if len(contributors) < 2:
            continue
        conflict = ValueConflict(namespace, [source.path for source in contributors])
        if not development:
            raise conflict
        log_warning(
            "overlapping_namespace",
            **make_event(
                "file",
                contributors[0].path,
                {"namespace": namespace, "ignored": [source.path for source in contributors[1:]], "detail": str(conflict)},
            ),
        )


def select_contributors(namespaces: dict[str, list[NamespacedSource]]) -> Sequence[NamespacedSource]:
    """Return the first contributor of every namespace."""

    return [contributors[0] for contributors in namespaces.values() if contributors]
