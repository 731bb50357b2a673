"""
Servicios de aplicacion.

Piezas reutilizables de la sincronizacion que no pertenecen a una
etapa concreta: jerarquia por nombre, resolucion de padres y
reconciliadores por entidad.
"""
from soc_sync.application.services.hierarchy_resolver import (
    HierarchyMaps,
    HierarchyResolver,
    JobParents,
    build_hierarchy_maps,
)
from soc_sync.application.services.parent_resolution import (
    FirstSiblingFallback,
    HierarchyLookup,
    ParentResolution,
    ParentResolutionStrategy,
    ParentResolver,
)
from soc_sync.application.services.reconcilers import (
    CompanyReconciler,
    UnitReconciler,
    SectorReconciler,
    JobReconciler,
)

__all__ = [
    # Jerarquia
    "HierarchyMaps",
    "HierarchyResolver",
    "JobParents",
    "build_hierarchy_maps",
    # Resolucion de padres
    "FirstSiblingFallback",
    "HierarchyLookup",
    "ParentResolution",
    "ParentResolutionStrategy",
    "ParentResolver",
    # Reconciliadores
    "CompanyReconciler",
    "UnitReconciler",
    "SectorReconciler",
    "JobReconciler",
]
