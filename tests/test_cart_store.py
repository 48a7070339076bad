import json
from dataclasses import FrozenInstanceError

import pytest

from storefront.core.constants import CART_STORAGE_KEY, DEFAULT_PLACEHOLDER_IMAGE
from storefront.core.exceptions import StorageError, ValidationException
from storefront.domain.product import Product
from storefront.integrations.storage import MemoryKeyValueStorage
from storefront.services.cart_store import CartStore


class BrokenStorage:
    def __init__(self, data: str | None = None) -> None:
        self.data = data

    def get(self, key: str) -> str | None:
        raise StorageError("disk on fire")

    def set(self, key: str, value: str) -> None:
        raise StorageError("disk on fire")

    def delete(self, key: str) -> None:
        raise StorageError("disk on fire")


def _persisted(storage: MemoryKeyValueStorage) -> list[dict]:
    return json.loads(storage.get(CART_STORAGE_KEY))


def test_add_twice_merges_into_one_line(cart: CartStore, tee: dict) -> None:
    cart.add_to_cart(tee, size="M")
    line = cart.add_to_cart(tee, size="M")

    assert len(cart) == 1
    assert line.line_key == "7:M"
    assert line.quantity == 2


def test_new_line_captures_price_name_and_image(cart: CartStore, tee: dict, cap: dict) -> None:
    tee_line = cart.add_to_cart(tee, size="L", quantity=3)
    cap_line = cart.add_to_cart(cap)

    assert tee_line.unit_price_cents == 1999
    assert tee_line.name == "Box Logo Tee"
    assert tee_line.image_url == "/images/tee.jpg"
    assert tee_line.quantity == 3
    assert cap_line.line_key == "11:"
    assert cap_line.size is None
    assert cap_line.unit_price_cents == 2450
    assert cap_line.image_url == "https://cdn.example.com/cap.png"


def test_missing_image_uses_store_placeholder(storage: MemoryKeyValueStorage) -> None:
    cart = CartStore(storage, placeholder="/img/none.png")
    line = cart.add_to_cart({"id": 1, "name": "Socks", "price": 5})
    assert line.image_url == "/img/none.png"

    default_cart = CartStore(MemoryKeyValueStorage())
    assert default_cart.add_to_cart({"id": 1, "price": 5}).image_url == DEFAULT_PLACEHOLDER_IMAGE


def test_accepts_product_models(cart: CartStore, tee: dict) -> None:
    product = Product.model_validate(tee)
    line = cart.add_to_cart(product, size="M")
    assert line.product_id == 7
    assert line.unit_price_cents == 1999


def test_product_without_id_is_rejected(cart: CartStore) -> None:
    with pytest.raises(ValidationException):
        cart.add_to_cart({"name": "Mystery", "price": 1})
    assert cart.is_empty


def test_non_numeric_product_id_is_rejected(cart: CartStore) -> None:
    with pytest.raises(ValidationException, match="no valid id"):
        cart.add_to_cart({"id": "abc", "name": "Mystery", "price": 1})
    assert cart.is_empty


def test_every_mutation_persists(cart: CartStore, storage: MemoryKeyValueStorage, tee: dict) -> None:
    cart.add_to_cart(tee, size="M")
    assert _persisted(storage)[0]["quantity"] == 1

    cart.update_quantity("7:M", 5)
    assert _persisted(storage)[0]["quantity"] == 5

    cart.remove_from_cart("7:M")
    assert _persisted(storage) == []

    cart.add_to_cart(tee, size="L")
    cart.clear_cart()
    assert _persisted(storage) == []


def test_persisted_shape(cart: CartStore, storage: MemoryKeyValueStorage, tee: dict) -> None:
    cart.add_to_cart(tee, size="M")
    assert _persisted(storage) == [
        {
            "lineKey": "7:M",
            "productId": 7,
            "name": "Box Logo Tee",
            "imageUrl": "/images/tee.jpg",
            "size": "M",
            "quantity": 1,
            "unitPriceCents": 1999,
        }
    ]


def test_reload_restores_lines(storage: MemoryKeyValueStorage, tee: dict) -> None:
    first = CartStore(storage)
    first.add_to_cart(tee, size="M", quantity=2)

    second = CartStore(storage)
    assert second.lines == first.lines


@pytest.mark.parametrize("raw", ["{not json", "42", '{"lineKey": "1:"}', ""])
def test_corrupt_persisted_cart_starts_empty(raw: str) -> None:
    cart = CartStore(MemoryKeyValueStorage({CART_STORAGE_KEY: raw}))
    assert cart.is_empty


def test_legacy_lines_are_migrated_on_load() -> None:
    raw = json.dumps([{"lineKey": "12:XL", "name": "Hoodie", "size": "XL", "quantity": 1, "unitPriceCents": 5500}])
    cart = CartStore(MemoryKeyValueStorage({CART_STORAGE_KEY: raw}))

    assert cart.get_line("12:XL").product_id == 12


def test_legacy_line_without_size_keeps_size_in_payload() -> None:
    raw = json.dumps([{"lineKey": "12:XL", "name": "Hoodie", "quantity": 1, "unitPriceCents": 5500}])
    cart = CartStore(MemoryKeyValueStorage({CART_STORAGE_KEY: raw}))

    payload = cart.build_checkout_payload(user_id=1)

    assert payload.to_dict()["items"] == [{"productId": 12, "size": "XL", "quantity": 1}]


def test_line_snapshots_are_read_only(cart: CartStore, storage: MemoryKeyValueStorage, tee: dict) -> None:
    cart.add_to_cart(tee, size="M")
    snapshot = cart.lines

    with pytest.raises(FrozenInstanceError):
        snapshot[0].quantity = 0

    assert cart.get_line("7:M").quantity == 1
    assert _persisted(storage)[0]["quantity"] == 1


@pytest.mark.parametrize("requested", ["abc", 0, -2, None])
def test_update_quantity_clamps_to_one(cart: CartStore, tee: dict, requested) -> None:
    cart.add_to_cart(tee, size="M", quantity=4)
    cart.update_quantity("7:M", requested)
    assert cart.get_line("7:M").quantity == 1


def test_remove_missing_line_is_noop(cart: CartStore, tee: dict) -> None:
    cart.add_to_cart(tee, size="M")
    before = cart.lines

    cart.remove_from_cart("does-not-exist")

    assert cart.lines == before


def test_subtotal_is_integer_cents(cart: CartStore, tee: dict, cap: dict) -> None:
    cart.add_to_cart(tee, size="M", quantity=3)
    cart.add_to_cart(cap, quantity=2)
    cart.update_quantity("7:M", "5")

    totals = cart.get_totals()
    assert totals.subtotal_cents == 1999 * 5 + 2450 * 2
    assert isinstance(totals.subtotal_cents, int)
    assert totals.item_count == 7


def test_checkout_payload_drops_display_fields(cart: CartStore, tee: dict, cap: dict) -> None:
    cart.add_to_cart(tee, size="M", quantity=2)
    cart.add_to_cart(cap)

    payload = cart.build_checkout_payload(user_id=1)

    assert payload.to_dict() == {
        "userId": 1,
        "items": [
            {"productId": 7, "size": "M", "quantity": 2},
            {"productId": 11, "size": None, "quantity": 1},
        ],
        "amount": 64.48,
    }


def test_storage_failures_are_swallowed(tee: dict, caplog) -> None:
    cart = CartStore(BrokenStorage())
    assert cart.is_empty

    cart.add_to_cart(tee, size="M")
    cart.update_quantity("7:M", 3)
    cart.clear_cart()

    assert cart.is_empty
    assert "Cart storage write failed" in caplog.text


def test_subscribers_receive_new_lines(cart: CartStore, tee: dict) -> None:
    seen: list[int] = []
    unsubscribe = cart.subscribe(lambda lines: seen.append(len(lines)))

    cart.add_to_cart(tee, size="M")
    cart.add_to_cart(tee, size="L")
    unsubscribe()
    cart.clear_cart()

    assert seen == [1, 2]


def test_failing_subscriber_does_not_break_cart(cart: CartStore, tee: dict) -> None:
    def boom(_lines):
        raise RuntimeError("listener bug")

    cart.subscribe(boom)
    cart.add_to_cart(tee, size="M")

    assert len(cart) == 1
