"""
Calibration order of curves and curve groups.

A curve depends on every curve its nodes need for discounting or projection.
Curves whose dependencies are all known are solved together as one layer;
groups are ordered the same way by the curves they need from each other.
"""

from typing import Dict, List, Optional, Sequence, Tuple

from ratescal.curves.definition import CurveDefinition, CurveGroupDefinition
from ratescal.curves.provider import RatesProvider
from ratescal.errors import CyclicCurveDependencyError, InvalidCurveGroupError


def _append_unique(names: List[str], name: str) -> None:
    if name not in names:
        names.append(name)


def resolve_requirements(
    definition: CurveDefinition,
    group: CurveGroupDefinition,
    seed: Optional[RatesProvider] = None,
) -> Tuple[str, ...]:
    """
    Names of the curves a curve's nodes need, in node order.

    The group's own mappings take precedence over the seed provider's.

    Raises:
        InvalidCurveGroupError: If a requirement is covered neither by the
            group nor by the seed
    """
    required: List[str] = []
    for node in definition.nodes:
        requirements = node.requirements()
        for currency in requirements.discount_currencies:
            name = group.find_discount_curve_name(currency)
            if name is None and seed is not None:
                name = seed.find_discount_curve_name(currency)
            if name is None:
                raise InvalidCurveGroupError(
                    f"Curve {definition.name} node {node.quote_id} needs a discount curve "
                    f"for {currency}, which is neither in group {group.name} nor seeded"
                )
            _append_unique(required, name)
        for index in requirements.forward_indices:
            name = group.find_forward_curve_name(index)
            if name is None and seed is not None:
                name = seed.find_forward_curve_name(index)
            if name is None:
                raise InvalidCurveGroupError(
                    f"Curve {definition.name} node {node.quote_id} needs a forward curve "
                    f"for {index.name}, which is neither in group {group.name} nor seeded"
                )
            _append_unique(required, name)
    return tuple(required)


def curve_dependencies(
    group: CurveGroupDefinition, seed: Optional[RatesProvider] = None
) -> Dict[str, Tuple[str, ...]]:
    """Curve name -> curves of the same group it depends on, self excluded."""
    in_group = set(group.curve_names)
    return {
        definition.name: tuple(
            name
            for name in resolve_requirements(definition, group, seed)
            if name in in_group and name != definition.name
        )
        for definition in group.curves
    }


def _kahn_layers(names: Sequence[str], dependencies: Dict[str, Tuple[str, ...]]) -> List[List[str]]:
    done: set = set()
    remaining = list(names)
    layers = []
    while remaining:
        ready = [n for n in remaining if all(d in done for d in dependencies[n])]
        if not ready:
            raise CyclicCurveDependencyError(remaining)
        layers.append(ready)
        done.update(ready)
        remaining = [n for n in remaining if n not in done]
    return layers


def layer_curves(
    group: CurveGroupDefinition, seed: Optional[RatesProvider] = None
) -> List[Tuple[CurveDefinition, ...]]:
    """
    Split a group into layers solved one after another.

    Each layer holds every curve whose dependencies are satisfied by seed
    curves and earlier layers, in the group's configuration order.

    Raises:
        CyclicCurveDependencyError: If the remaining curves depend on each other
        InvalidCurveGroupError: If a node requirement cannot be resolved
    """
    dependencies = curve_dependencies(group, seed)
    layers = _kahn_layers(group.curve_names, dependencies)
    return [tuple(group.find_curve_definition(n) for n in layer) for layer in layers]


def order_groups(
    groups: Sequence[CurveGroupDefinition], seed: Optional[RatesProvider] = None
) -> List[CurveGroupDefinition]:
    """
    Order groups so that each is calibrated after the groups providing its curves.

    Raises:
        CyclicCurveDependencyError: If groups need curves from each other in a cycle
        InvalidCurveGroupError: If a requirement is provided by no group and no seed
    """
    names = [g.name for g in groups]
    if len(set(names)) != len(names):
        raise InvalidCurveGroupError(f"Duplicate curve group names: {names}")

    owner: Dict[str, str] = {}
    for group in groups:
        for curve_name in group.curve_names:
            if curve_name in owner:
                raise InvalidCurveGroupError(
                    f"Curve {curve_name} is defined in groups {owner[curve_name]} and {group.name}"
                )
            owner[curve_name] = group.name

    dependencies: Dict[str, Tuple[str, ...]] = {}
    for group in groups:
        required: List[str] = []
        for definition in group.curves:
            for node in definition.nodes:
                requirements = node.requirements()
                for currency in requirements.discount_currencies:
                    if group.find_discount_curve_name(currency) is None:
                        _append_unique(
                            required, _providing_group(groups, seed, group, currency=currency)
                        )
                for index in requirements.forward_indices:
                    if group.find_forward_curve_name(index) is None:
                        _append_unique(required, _providing_group(groups, seed, group, index=index))
        dependencies[group.name] = tuple(
            name for name in required if name is not None and name != group.name
        )

    by_name = {g.name: g for g in groups}
    return [by_name[n] for layer in _kahn_layers(names, dependencies) for n in layer]


def _providing_group(groups, seed, requesting, currency=None, index=None) -> Optional[str]:
    """Name of the group whose mapping covers a requirement, ``None`` when seeded."""
    for group in groups:
        if currency is not None and group.find_discount_curve_name(currency) is not None:
            return group.name
        if index is not None and group.find_forward_curve_name(index) is not None:
            return group.name
    if seed is not None:
        if currency is not None and seed.find_discount_curve_name(currency) is not None:
            return None
        if index is not None and seed.find_forward_curve_name(index) is not None:
            return None
    what = f"discount curve for {currency}" if currency is not None else f"forward curve for {index.name}"
    raise InvalidCurveGroupError(
        f"Group {requesting.name} needs a {what}, provided by no group and no seed"
    )
