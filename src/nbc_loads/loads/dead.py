"""Dead load of a layered assembly (floor, roof or wall build-up)."""

from __future__ import annotations

from collections.abc import Iterable

from nbc_loads.models import AssemblyLayer, DeadLoadAnalysis, LoadResult, Material

MIN_THICKNESS_MM = 1.0


def layer_load(material: Material, thickness_mm: float | None = None) -> AssemblyLayer:
    """Area load of one layer.

    kPa materials are taken as-is. kN/m3 materials are multiplied by the
    layer thickness, given in millimetres and never less than 1 mm.
    """
    if material.units == "kN/m3":
        thickness = max(thickness_mm if thickness_mm is not None else 100.0, MIN_THICKNESS_MM)
        return AssemblyLayer(material, thickness, material.value * thickness / 1000)
    return AssemblyLayer(material, None, material.value)


def compute_dead_load(
    layers: Iterable[tuple[Material, float | None]],
) -> DeadLoadAnalysis:
    """Sum an assembly given as (material, thickness_mm) pairs."""
    built = tuple(layer_load(material, thickness) for material, thickness in layers)
    total = sum(layer.load for layer in built)

    results: list[LoadResult] = []
    for layer in built:
        m = layer.material
        if layer.thickness_mm is None:
            calc = f"{m.value} kPa"
        else:
            calc = f"{m.value} kN/m³ × {layer.thickness_mm:g} mm / 1000 = {layer.load:.3f} kPa"
        results.append(LoadResult(m.name, layer.load, "kPa", m.category, calc))
    results.append(
        LoadResult("Total Dead Load", total, "kPa", f"Sum of {len(built)} layers")
    )
    return DeadLoadAnalysis(layers=built, total=total, results=tuple(results))
