import pytest

from app.services.category_resolver import CategoryResolver, parse_category_id

PRODUCT_ID = 10


class InMemoryCategoryStore:
    def __init__(self, unique_links: bool = True):
        self.unique_links = unique_links
        self.categories: dict[int, dict] = {}
        self.links: list[tuple[int, int]] = []
        self.link_calls: list[int] = []
        self.unlink_calls: list[list[int]] = []
        self._next_id = 1

    def add_category(self, name: str, product_id: int | None = None) -> int:
        category_id = self._next_id
        self._next_id += 1
        self.categories[category_id] = {"name": name, "product_id": product_id}
        return category_id

    def find_category_id(self, ref: str) -> int | None:
        category_id = parse_category_id(ref)
        return category_id if category_id in self.categories else None

    def create_category(self, *, name: str, product_id: int) -> int:
        return self.add_category(name, product_id)

    def linked_category_ids(self, product_id: int) -> set[int]:
        return {category_id for pid, category_id in self.links if pid == product_id}

    def link(self, product_id: int, category_id: int) -> None:
        self.link_calls.append(category_id)
        if self.unique_links and (product_id, category_id) in self.links:
            return
        self.links.append((product_id, category_id))

    def unlink(self, product_id: int, category_ids) -> None:
        ids = sorted(category_ids)
        self.unlink_calls.append(ids)
        self.links = [
            (pid, category_id)
            for pid, category_id in self.links
            if not (pid == product_id and category_id in ids)
        ]


class FailingLinkStore(InMemoryCategoryStore):
    def link(self, product_id: int, category_id: int) -> None:
        raise RuntimeError("link table unavailable")


@pytest.fixture()
def store():
    return InMemoryCategoryStore()


@pytest.fixture()
def resolver(store):
    return CategoryResolver(store)


def test_existing_id_resolves_to_itself_without_creating(store, resolver):
    audio = store.add_category("Audio")

    assert resolver.resolve_reference(PRODUCT_ID, str(audio)) == audio
    assert list(store.categories) == [audio]


def test_unknown_reference_creates_category_named_after_it(store, resolver):
    created = resolver.resolve_reference(PRODUCT_ID, "Garden")

    assert store.categories[created] == {"name": "Garden", "product_id": PRODUCT_ID}
    assert len(store.categories) == 1


def test_numeric_reference_without_matching_id_becomes_a_name(store, resolver):
    created = resolver.resolve_reference(PRODUCT_ID, "999")

    assert created != 999
    assert store.categories[created]["name"] == "999"


def test_same_name_resolved_twice_creates_two_categories(store, resolver):
    first = resolver.resolve_reference(PRODUCT_ID, "X")
    second = resolver.resolve_reference(PRODUCT_ID, "X")

    assert first != second
    assert [entry["name"] for entry in store.categories.values()] == ["X", "X"]


def test_attach_on_create_links_in_input_order(store, resolver):
    audio = store.add_category("Audio")

    resolver.attach_on_create(PRODUCT_ID, [str(audio), "Garden"])

    garden = max(store.categories)
    assert store.links == [(PRODUCT_ID, audio), (PRODUCT_ID, garden)]


def test_attach_on_create_leaves_repeated_ids_to_the_store(resolver, store):
    audio = store.add_category("Audio")

    resolver.attach_on_create(PRODUCT_ID, [str(audio), str(audio)])

    assert store.link_calls == [audio, audio]
    assert store.links == [(PRODUCT_ID, audio)]


def test_attach_on_create_with_permissive_store_keeps_both_links():
    store = InMemoryCategoryStore(unique_links=False)
    audio = store.add_category("Audio")

    CategoryResolver(store).attach_on_create(PRODUCT_ID, [str(audio), str(audio)])

    assert store.links == [(PRODUCT_ID, audio), (PRODUCT_ID, audio)]


def test_reconcile_replaces_stale_link_and_creates_named_category(store, resolver):
    c1 = store.add_category("Audio")
    c2 = store.add_category("Video")
    store.links = [(PRODUCT_ID, c1), (PRODUCT_ID, c2)]

    sync = resolver.reconcile_on_update(PRODUCT_ID, [str(c1), "newname"])

    c3 = max(store.categories)
    assert store.categories[c3]["name"] == "newname"
    assert store.linked_category_ids(PRODUCT_ID) == {c1, c3}
    assert sync.attached == [c3]
    assert sync.detached == [c2]
    # c1 was already linked and must not be relinked.
    assert store.link_calls == [c3]
    assert store.unlink_calls == [[c2]]


def test_reconcile_is_idempotent_for_same_resolved_set(store, resolver):
    c1 = store.add_category("Audio")
    c2 = store.add_category("Video")

    resolver.reconcile_on_update(PRODUCT_ID, [str(c1), str(c2)])
    second = resolver.reconcile_on_update(PRODUCT_ID, [str(c2), str(c1)])

    assert second.attached == []
    assert second.detached == []
    assert sorted(store.links) == [(PRODUCT_ID, c1), (PRODUCT_ID, c2)]


def test_reconcile_collapses_duplicate_references(store, resolver):
    c1 = store.add_category("Audio")

    sync = resolver.reconcile_on_update(PRODUCT_ID, [str(c1), str(c1)])

    assert sync.attached == [c1]
    assert store.link_calls == [c1]


def test_reconcile_with_empty_list_clears_links(store, resolver):
    c1 = store.add_category("Audio")
    c2 = store.add_category("Video")
    store.links = [(PRODUCT_ID, c1), (PRODUCT_ID, c2)]

    sync = resolver.reconcile_on_update(PRODUCT_ID, [])

    assert store.linked_category_ids(PRODUCT_ID) == set()
    assert sync.detached == [c1, c2]
    # Categories themselves are never removed.
    assert set(store.categories) == {c1, c2}


def test_reconcile_only_touches_the_given_product(store, resolver):
    c1 = store.add_category("Audio")
    store.links = [(PRODUCT_ID, c1), (PRODUCT_ID + 1, c1)]

    resolver.reconcile_on_update(PRODUCT_ID, [])

    assert store.links == [(PRODUCT_ID + 1, c1)]


def test_store_failure_propagates_and_keeps_created_categories():
    store = FailingLinkStore()
    resolver = CategoryResolver(store)

    with pytest.raises(RuntimeError, match="link table unavailable"):
        resolver.attach_on_create(PRODUCT_ID, ["Garden", "Patio"])

    assert [entry["name"] for entry in store.categories.values()] == ["Garden"]


@pytest.mark.parametrize(
    "ref, expected",
    [
        ("12", 12),
        ("007", 7),
        ("abc", None),
        ("12abc", None),
        ("-1", None),
        ("1.5", None),
        ("", None),
        (" 3", None),
        ("١٢", None),
        ("9" * 30, None),
    ],
)
def test_parse_category_id(ref, expected):
    assert parse_category_id(ref) == expected
