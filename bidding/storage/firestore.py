"""Firestore storage backend leveraging google-cloud-firestore."""

from __future__ import annotations

import asyncio
from typing import Any, Callable

from google.api_core.exceptions import AlreadyExists
from google.cloud import firestore
from google.oauth2 import service_account

from ..exceptions import BidConflictError, BidNotFoundError, InvalidBidTransition


class FirestoreStorage:
    def __init__(
        self,
        *,
        project_id: str,
        collection: str = "bids",
        products_collection: str = "products",
        credentials_path: str | None = None,
    ) -> None:
        if not project_id:
            raise ValueError("project_id required for firestore backend")
        client_kwargs: dict[str, Any] = {"project": project_id}
        if credentials_path:
            client_kwargs["credentials"] = service_account.Credentials.from_service_account_file(
                credentials_path
            )
        self._client = firestore.Client(**client_kwargs)
        self._collection_name = collection
        self._products_collection_name = products_collection

    def _collection(self):
        return self._client.collection(self._collection_name)

    def _products_collection(self):
        return self._client.collection(self._products_collection_name)

    def _bid_document(self, product_id: str, buyer_email: str):
        return self._collection().document(f"{product_id}:{buyer_email}")

    async def _run(self, func: Callable, *args, **kwargs):
        return await asyncio.to_thread(func, *args, **kwargs)

    async def create_bid(self, bid: dict[str, Any]) -> dict[str, Any]:
        document = self._bid_document(bid["product_id"], bid["buyer_email"])
        try:
            await self._run(document.create, bid)
        except AlreadyExists as exc:
            raise BidConflictError(
                f"bid for {bid['product_id']} by {bid['buyer_email']} already exists"
            ) from exc
        return bid

    async def get_bid(self, product_id: str, buyer_email: str) -> dict[str, Any] | None:
        doc = await self._run(self._bid_document(product_id, buyer_email).get)
        if not doc.exists:
            return None
        return doc.to_dict()

    async def list_bids(self, product_id: str | None = None) -> list[dict[str, Any]]:
        query = self._collection()
        if product_id is not None:
            query = query.where(filter=firestore.FieldFilter("product_id", "==", product_id))
        docs = await self._run(lambda: list(query.stream()))
        return [doc.to_dict() for doc in docs]

    async def update_bid(
        self,
        product_id: str,
        buyer_email: str,
        updates: dict[str, Any],
        expected_status: str | None = None,
    ) -> dict[str, Any]:
        document = self._bid_document(product_id, buyer_email)

        @firestore.transactional
        def _update(transaction) -> dict[str, Any]:
            snapshot = document.get(transaction=transaction)
            if not snapshot.exists:
                raise BidNotFoundError(f"bid for {product_id} by {buyer_email} not found")
            bid = snapshot.to_dict()
            if expected_status is not None and bid.get("status") != expected_status:
                raise InvalidBidTransition(
                    f"bid status changed from {expected_status} to {bid.get('status')}"
                )
            bid.update(updates)
            transaction.set(document, bid)
            return bid

        return await self._run(_update, self._client.transaction())

    # Product storage methods

    async def get_product(self, product_id: str) -> dict[str, Any] | None:
        doc = await self._run(self._products_collection().document(product_id).get)
        if not doc.exists:
            return None
        return doc.to_dict()

    async def save_product(self, product: dict[str, Any]) -> dict[str, Any]:
        await self._run(self._products_collection().document(product["product_id"]).set, product)
        return product
