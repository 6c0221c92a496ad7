"""Tests for the in-memory link list controller, against a fake store."""

import uuid
from dataclasses import replace

import pytest

from openlink.errors import CreationError, NotFoundError, PersistenceError, ValidationError
from openlink.services.link_list import LinkListController, LinkRecord
from openlink.services.ordering import insertion_order

OWNER = 'owner-1'


class FakeLinkStore:
    """Dict-backed store that records every write and can be told to fail."""

    def __init__(self, links=(), owners=(OWNER,)):
        self.rows = {link.id: replace(link) for link in links}
        self.owners = set(owners)
        self.calls = []
        self.fail = False

    def _maybe_fail(self):
        if self.fail:
            raise PersistenceError('store is down')

    def create(self, owner_id):
        self.calls.append(('create', owner_id))
        if owner_id not in self.owners:
            raise CreationError('Profile not found')
        self._maybe_fail()
        orders = [r.order for r in self.rows.values() if r.profile_id == owner_id]
        link = LinkRecord(id=str(uuid.uuid4()), profile_id=owner_id, order=insertion_order(orders))
        self.rows[link.id] = replace(link)
        return link

    def update(self, link_id, fields):
        self.calls.append(('update', link_id, dict(fields)))
        self._maybe_fail()
        for field, value in fields.items():
            setattr(self.rows[link_id], field, value)

    def delete(self, link_id):
        self.calls.append(('delete', link_id))
        self._maybe_fail()
        self.rows.pop(link_id, None)

    def list(self, owner_id):
        rows = [replace(r) for r in self.rows.values() if r.profile_id == owner_id]
        return sorted(rows, key=lambda r: r.order)

    def writes(self):
        return [c for c in self.calls if c[0] == 'update']


def _make_links(n, orders=None):
    orders = orders if orders is not None else list(range(n))
    return [
        LinkRecord(id=f'link-{i}', profile_id=OWNER, title=f'Link {i}', order=orders[i])
        for i in range(n)
    ]


def _controller(links):
    store = FakeLinkStore(links)
    return LinkListController.load(OWNER, store), store


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------

class TestAdd:
    def test_add_prepends_empty_inactive_link(self):
        controller, store = _controller(_make_links(3))
        link = controller.add()
        assert controller.ids[0] == link.id
        assert link.title == ''
        assert link.target_url == ''
        assert link.is_active is False
        assert [r.id for r in store.list(OWNER)][0] == link.id

    @pytest.mark.parametrize('orders', [[0, 1, 2], [-3, -1, 5], [10, 40, 41]])
    def test_new_link_sorts_first_for_any_existing_orders(self, orders):
        controller, store = _controller(_make_links(3, orders))
        link = controller.add()
        assert link.order < min(orders)
        assert store.list(OWNER)[0].id == link.id

    def test_add_into_empty_list(self):
        controller, _ = _controller([])
        link = controller.add()
        assert link.order == 0
        assert controller.ids == [link.id]

    def test_add_without_profile_raises_creation_error(self):
        store = FakeLinkStore(owners=())
        controller = LinkListController.load(OWNER, store)
        with pytest.raises(CreationError):
            controller.add()
        assert controller.links == []


# ---------------------------------------------------------------------------
# edit / commit
# ---------------------------------------------------------------------------

class TestEdit:
    def test_edit_is_local_until_commit(self):
        controller, store = _controller(_make_links(2))
        controller.edit('link-0', 'title', 'My site')
        assert controller.get('link-0').title == 'My site'
        assert store.writes() == []

        assert controller.commit('link-0') is True
        assert store.writes() == [('update', 'link-0', {'title': 'My site'})]
        assert store.rows['link-0'].title == 'My site'

    def test_commit_with_unchanged_value_is_skipped(self):
        controller, store = _controller(_make_links(2))
        controller.edit('link-0', 'title', 'Link 0')
        assert controller.commit('link-0') is False
        assert store.calls == []

    def test_commit_after_reverting_edit_is_skipped(self):
        controller, store = _controller(_make_links(1))
        controller.edit('link-0', 'target_url', 'https://a.example')
        controller.edit('link-0', 'target_url', '')
        assert controller.commit('link-0') is False

    def test_second_commit_of_same_value_is_skipped(self):
        controller, store = _controller(_make_links(1))
        controller.edit('link-0', 'target_url', 'https://a.example')
        controller.commit('link-0')
        assert controller.commit('link-0') is False
        assert len(store.writes()) == 1

    def test_only_changed_fields_are_written(self):
        controller, store = _controller(_make_links(1))
        controller.edit('link-0', 'title', 'Link 0')
        controller.edit('link-0', 'target_url', 'https://b.example')
        controller.commit('link-0')
        assert store.writes() == [('update', 'link-0', {'target_url': 'https://b.example'})]

    def test_failed_commit_keeps_edit_and_marks_dirty(self):
        controller, store = _controller(_make_links(1))
        store.fail = True
        controller.edit('link-0', 'title', 'Edited')
        controller.commit('link-0')
        assert controller.get('link-0').title == 'Edited'
        assert controller.dirty == {'link-0'}

        store.fail = False
        assert controller.commit('link-0') is True
        assert controller.dirty == set()

    def test_later_write_of_other_field_keeps_link_dirty(self):
        controller, store = _controller(_make_links(1))
        store.fail = True
        controller.edit('link-0', 'title', 'Edited')
        controller.commit('link-0')

        store.fail = False
        controller.toggle('link-0', True)
        assert store.rows['link-0'].title == 'Link 0'
        assert store.rows['link-0'].is_active is True
        assert controller.dirty == {'link-0'}

        assert controller.commit('link-0') is True
        assert store.rows['link-0'].title == 'Edited'
        assert controller.dirty == set()

    def test_unknown_field_is_rejected(self):
        controller, _ = _controller(_make_links(1))
        with pytest.raises(ValidationError):
            controller.edit('link-0', 'order', 5)

    def test_unknown_link(self):
        controller, _ = _controller(_make_links(1))
        with pytest.raises(NotFoundError):
            controller.edit('missing', 'title', 'x')


# ---------------------------------------------------------------------------
# toggle
# ---------------------------------------------------------------------------

class TestToggle:
    def test_toggle_writes_once_and_keeps_order(self):
        controller, store = _controller(_make_links(3, [4, 8, 9]))
        controller.toggle('link-1', True)
        assert controller.get('link-1').is_active is True
        assert store.writes() == [('update', 'link-1', {'is_active': True})]
        assert store.rows['link-1'].order == 8

    def test_failed_toggle_keeps_local_state(self):
        controller, store = _controller(_make_links(1))
        store.fail = True
        controller.toggle('link-0', True)
        assert controller.get('link-0').is_active is True
        assert 'link-0' in controller.dirty


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------

class TestDelete:
    def test_delete_removes_locally_and_from_store(self):
        controller, store = _controller(_make_links(3))
        assert controller.delete('link-1') is True
        assert 'link-1' not in controller.ids
        assert 'link-1' not in [r.id for r in store.list(OWNER)]

    def test_failed_delete_is_not_rolled_back(self):
        controller, store = _controller(_make_links(2))
        store.fail = True
        assert controller.delete('link-0') is False
        assert controller.ids == ['link-1']
        assert controller.dirty == {'link-0'}
        assert 'link-0' in store.rows


# ---------------------------------------------------------------------------
# reorder
# ---------------------------------------------------------------------------

class TestReorder:
    def test_reorder_updates_memory_and_store(self):
        controller, store = _controller(_make_links(4))
        controller.reorder('link-3', 3, 0)
        expected = ['link-3', 'link-0', 'link-1', 'link-2']
        assert controller.ids == expected
        assert [r.id for r in store.list(OWNER)] == expected

    def test_every_move_reads_back_in_target_order(self):
        n = 6
        for i in range(n):
            for j in range(n):
                controller, store = _controller(_make_links(n))
                expected = list(controller.ids)
                expected.insert(j, expected.pop(i))
                controller.reorder(expected[j], i, j)
                assert controller.ids == expected
                assert [r.id for r in store.list(OWNER)] == expected

    def test_reorder_to_same_position_writes_nothing(self):
        controller, store = _controller(_make_links(3))
        assert controller.reorder('link-1', 1, 1) == 0
        assert store.calls == []

    def test_reorder_single_link_writes_nothing(self):
        controller, store = _controller(_make_links(1))
        assert controller.reorder('link-0', 0, 0) == 0
        assert store.calls == []

    def test_only_changed_orders_are_written(self):
        controller, store = _controller(_make_links(4))
        writes = controller.reorder('link-1', 1, 2)
        assert writes == 2
        assert sorted(c[1] for c in store.writes()) == ['link-1', 'link-2']

    def test_non_contiguous_orders_are_renumbered(self):
        controller, store = _controller(_make_links(3, [-5, 10, 11]))
        controller.reorder('link-0', 0, 2)
        assert [link.order for link in controller.links] == [0, 1, 2]
        assert controller.ids == ['link-1', 'link-2', 'link-0']

    def test_stale_move_is_rejected(self):
        controller, store = _controller(_make_links(3))
        with pytest.raises(ValidationError):
            controller.reorder('link-2', 0, 1)
        assert controller.ids == ['link-0', 'link-1', 'link-2']
        assert store.calls == []

    def test_partial_failure_keeps_local_order(self):
        controller, store = _controller(_make_links(3))
        store.fail = True
        controller.reorder('link-2', 2, 0)
        assert controller.ids == ['link-2', 'link-0', 'link-1']
        assert controller.dirty == {'link-0', 'link-1', 'link-2'}
