from pytest_archon import archrule


def test_core_independence() -> None:
    """
    Core is the foundation: it must not depend on any other package.
    """
    (
        archrule("core_is_independent")
        .match("jsonapi_core*")
        .should_not_import("jsonapi_specifications*")
        .should_not_import("jsonapi_filtering*")
        .should_not_import("jsonapi_persistence_*")
        .should_not_import("jsonapi_controller*")
        .check("jsonapi_core")
    )


def test_specifications_layering() -> None:
    """
    The predicate model only knows about core types.
    """
    (
        archrule("specifications_layering")
        .match("jsonapi_specifications*")
        .should_not_import("jsonapi_filtering*")
        .should_not_import("jsonapi_persistence_*")
        .should_not_import("jsonapi_controller*")
        .check("jsonapi_specifications")
    )


def test_filtering_is_backend_agnostic() -> None:
    """
    Parsing filters must not depend on any storage backend or on the pipeline.
    """
    (
        archrule("filtering_layering")
        .match("jsonapi_filtering*")
        .should_not_import("jsonapi_persistence_*")
        .should_not_import("jsonapi_controller*")
        .should_not_import("motor*")
        .should_not_import("pymongo*")
        .check("jsonapi_filtering")
    )


def test_controller_is_storage_agnostic() -> None:
    """
    The pipeline talks to backends only through the adapter port.
    """
    (
        archrule("controller_storage_agnostic")
        .match("jsonapi_controller*")
        .should_not_import("jsonapi_persistence_*")
        .should_not_import("motor*")
        .should_not_import("pymongo*")
        .should_not_import("bson*")
        .check("jsonapi_controller")
    )


def test_persistence_layering() -> None:
    """
    Adapters depend on core and the predicate model, never on the pipeline
    or on each other.
    """
    (
        archrule("mongo_layering")
        .match("jsonapi_persistence_mongo*")
        .should_not_import("jsonapi_controller*")
        .should_not_import("jsonapi_filtering*")
        .should_not_import("jsonapi_persistence_memory*")
        .check("jsonapi_persistence_mongo")
    )
    (
        archrule("memory_layering")
        .match("jsonapi_persistence_memory*")
        .should_not_import("jsonapi_controller*")
        .should_not_import("jsonapi_filtering*")
        .should_not_import("jsonapi_persistence_mongo*")
        .should_not_import("motor*")
        .check("jsonapi_persistence_memory")
    )


def test_ports_layering() -> None:
    """
    Primitives are the lowest level and must not reach up into the registry or ports.
    """
    (
        archrule("ports_layering")
        .match("jsonapi_core.primitives*")
        .should_not_import("jsonapi_core.registry*")
        .should_not_import("jsonapi_core.ports*")
        .check("jsonapi_core")
    )
