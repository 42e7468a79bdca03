"""MongoAdapter — executes queries against MongoDB collections via Motor."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, ClassVar

from bson import ObjectId
from pymongo import ReturnDocument

from jsonapi_core.primitives.exceptions import APIErrors, bad_request, not_found
from jsonapi_core.query import (
    AddToRelationshipQuery,
    CreateQuery,
    DeleteQuery,
    FindQuery,
    FindResult,
    RemoveFromRelationshipQuery,
    UpdateQuery,
)
from jsonapi_core.resources import Collection, Relationship, Resource
from jsonapi_specifications.ast import ID_FIELD

from .errors import normalize_error as _normalize_error
from .exceptions import UnknownModelError
from .query_builder import MONGO_ID_FIELD, MongoQueryBuilder
from .serialization import doc_to_resource, relationship_value, resource_to_doc

if TYPE_CHECKING:
    from collections.abc import Mapping

    from motor.motor_asyncio import AsyncIOMotorCollection

    from jsonapi_core.query import Query

    from .connection import MongoConnectionManager
    from .serialization import MongoModel

logger = logging.getLogger("jsonapi.persistence.mongo")


class MongoAdapter:
    """MongoDB implementation of ``IStorageAdapter``.

    Each resource type maps to one collection through a ``MongoModel``.
    Relationship linkage is stored as bare ids on the owning document, so
    includes are resolved with one ``$in`` lookup per relationship path.

    Usage::

        connection = MongoConnectionManager("mongodb://localhost:27017", database="app")
        adapter = MongoAdapter(connection, {
            "people": MongoModel("people"),
            "posts": MongoModel("posts", {"author": RelationshipField("people")}),
        })
    """

    unary_filter_operators: ClassVar[tuple[str, ...]] = ("and", "or")
    binary_filter_operators: ClassVar[tuple[str, ...]] = (
        "eq", "neq", "ne", "in", "nin", "lt", "gt", "lte", "gte",
    )

    def __init__(
        self,
        connection: MongoConnectionManager,
        models: Mapping[str, MongoModel],
        *,
        database: str | None = None,
    ) -> None:
        self._connection = connection
        self._models = dict(models)
        self._database = database

    def _model(self, type_name: str) -> MongoModel:
        try:
            return self._models[type_name]
        except KeyError:
            raise UnknownModelError(f"No MongoModel declared for type {type_name!r}") from None

    def _collection(self, type_name: str) -> AsyncIOMotorCollection[Any]:
        db = self._connection.database(self._database)
        return db[self._model(type_name).collection]

    def _caster(self, type_name: str) -> Any:
        model = self._model(type_name)

        def cast(field: str, value: Any) -> Any:
            if field == ID_FIELD:
                target = model
            else:
                declared = model.relationships.get(field)
                target = self._models.get(declared.type) if declared is not None else None
            if target is None:
                return value
            if isinstance(value, list):
                return [target.cast_id(it) for it in value]
            return target.cast_id(value)

        return cast

    # ── Dispatch ─────────────────────────────────────────────────

    async def do_query(self, query: Query) -> Any:
        try:
            if isinstance(query, FindQuery):
                return await self._find(query)
            if isinstance(query, CreateQuery):
                return await self._create(query)
            if isinstance(query, UpdateQuery):
                return await self._update(query)
            if isinstance(query, DeleteQuery):
                return await self._delete(query)
            if isinstance(query, AddToRelationshipQuery):
                return await self._add_to_relationship(query)
            if isinstance(query, RemoveFromRelationshipQuery):
                return await self._remove_from_relationship(query)
        except Exception as exc:
            raise APIErrors(self.normalize_error(exc)) from exc
        raise TypeError(f"Unsupported query type: {type(query).__name__}")

    @staticmethod
    def normalize_error(err: BaseException) -> list[BaseException]:
        return _normalize_error(err)

    # ── Reads ────────────────────────────────────────────────────

    async def _find(self, query: FindQuery) -> FindResult:
        model = self._model(query.type)
        builder = MongoQueryBuilder(self._caster(query.type))
        ids = query.id_or_ids
        extra: dict[str, Any] | None = None
        if isinstance(ids, str):
            extra = {MONGO_ID_FIELD: model.cast_id(ids)}
        elif ids is not None:
            extra = {MONGO_ID_FIELD: {"$in": [model.cast_id(it) for it in ids]}}
        criteria = builder.build_match(query.filters, extra)

        selected = (query.select or {}).get(query.type)
        projection = builder.build_project(
            [*selected, *query.populates] if selected is not None else None
        )
        collection = self._collection(query.type)
        cursor = collection.find(criteria, projection)
        sort = builder.build_sort(query.sort)
        if sort:
            cursor = cursor.sort(sort)
        if query.offset:
            cursor = cursor.skip(query.offset)
        if query.limit is not None:
            cursor = cursor.limit(query.limit)
        docs = await cursor.to_list(length=None)
        logger.debug("find %s %s -> %d doc(s)", query.type, criteria, len(docs))

        if query.singular and not docs:
            raise not_found()

        primaries = [doc_to_resource(query.type, it, model) for it in docs]
        included = await self._includes(query.type, primaries, query.populates, query.select)
        if selected is not None:
            wanted = set(selected)
            for it in primaries:
                it.relationships = {k: v for k, v in it.relationships.items() if k in wanted}

        if query.singular:
            return FindResult(primaries[0], included, None)
        total = await collection.count_documents(criteria)
        return FindResult(Collection(primaries), included, total)

    async def _includes(
        self,
        type_name: str,
        primaries: list[Resource],
        paths: tuple[str, ...],
        select: Mapping[str, list[str]] | None,
    ) -> Collection:
        model = self._model(type_name)
        out: list[Resource] = []
        for path in paths:
            if "." in path:
                raise bad_request(f"Multi-level include paths are not supported: {path!r}.")
            declared = model.relationships.get(path)
            if declared is None:
                raise bad_request(f"{path!r} is not a relationship of {type_name!r}.")
            target = self._model(declared.type)
            ids = list(dict.fromkeys(
                ident.id
                for it in primaries
                if path in it.relationships
                for ident in it.relationships[path].identifiers
            ))
            if not ids:
                continue
            fields = (select or {}).get(declared.type)
            projection = MongoQueryBuilder().build_project(fields)
            cursor = self._collection(declared.type).find(
                {MONGO_ID_FIELD: {"$in": [target.cast_id(it) for it in ids]}}, projection
            )
            docs = await cursor.to_list(length=None)
            out.extend(doc_to_resource(declared.type, it, target) for it in docs)
        return Collection(out).deduplicated()

    # ── Writes ───────────────────────────────────────────────────

    async def _create(self, query: CreateQuery) -> Resource | Collection:
        records = query.records
        resources = list(records) if isinstance(records, Collection) else [records]
        docs: list[dict[str, Any]] = []
        for resource in resources:
            model = self._model(resource.type)
            attrs = resource.attrs
            if model.schema is not None:
                attrs = model.schema.model_validate(attrs).model_dump(exclude_unset=True)
            doc = resource_to_doc(resource, model, self._models, attrs=attrs)
            doc[MONGO_ID_FIELD] = ObjectId()
            docs.append(doc)

        if not docs:
            return Collection()

        collection = self._collection(query.type)
        if len(docs) == 1:
            await collection.insert_one(docs[0])
        else:
            await collection.insert_many(docs)
        logger.debug("Inserted %d %s document(s)", len(docs), query.type)

        model = self._model(query.type)
        created = [doc_to_resource(query.type, it, model) for it in docs]
        return Collection(created) if isinstance(records, Collection) else created[0]

    async def _update(self, query: UpdateQuery) -> Resource | Collection:
        model = self._model(query.type)
        collection = self._collection(query.type)

        async def apply(patch: Resource) -> Resource:
            if patch.id is None:
                raise bad_request("Resources to update must have an id.")
            changes = resource_to_doc(patch, model, self._models)
            selector = {MONGO_ID_FIELD: model.cast_id(patch.id)}
            if changes:
                doc = await collection.find_one_and_update(
                    selector, {"$set": changes}, return_document=ReturnDocument.AFTER
                )
            else:
                doc = await collection.find_one(selector)
            if doc is None:
                raise not_found(f"No {patch.type} found with id {patch.id}.")
            return doc_to_resource(query.type, doc, model)

        if isinstance(query.patch, Collection):
            return Collection([await apply(it) for it in query.patch])
        return await apply(query.patch)

    async def _delete(self, query: DeleteQuery) -> None:
        model = self._model(query.type)
        collection = self._collection(query.type)
        if isinstance(query.id_or_ids, str):
            result = await collection.delete_one({MONGO_ID_FIELD: model.cast_id(query.id_or_ids)})
        else:
            ids = [model.cast_id(it) for it in query.id_or_ids]
            result = await collection.delete_many({MONGO_ID_FIELD: {"$in": ids}})
        if not result.deleted_count:
            raise not_found()
        logger.debug("Deleted %d %s document(s)", result.deleted_count, query.type)

    def _to_many_field(
        self, query: AddToRelationshipQuery | RemoveFromRelationshipQuery
    ) -> tuple[MongoModel, list[Any]]:
        model = self._model(query.type)
        declared = model.relationships.get(query.relationship_name)
        if declared is None:
            raise bad_request(f"{query.relationship_name!r} is not a relationship of {query.type!r}.")
        if not declared.to_many:
            raise bad_request(
                f"{query.relationship_name!r} is a to-one relationship; use PATCH to replace it."
            )
        ids = relationship_value(Relationship(list(query.linkage)), self._models.get(declared.type))
        return model, ids

    async def _add_to_relationship(self, query: AddToRelationshipQuery) -> None:
        model, ids = self._to_many_field(query)
        result = await self._collection(query.type).update_one(
            {MONGO_ID_FIELD: model.cast_id(query.id)},
            {"$addToSet": {query.relationship_name: {"$each": ids}}},
        )
        if not result.matched_count:
            raise not_found()

    async def _remove_from_relationship(self, query: RemoveFromRelationshipQuery) -> None:
        model, ids = self._to_many_field(query)
        result = await self._collection(query.type).update_one(
            {MONGO_ID_FIELD: model.cast_id(query.id)},
            {"$pullAll": {query.relationship_name: ids}},
        )
        if not result.matched_count:
            raise not_found()
