"""Tests for indep.handle module."""

import threading

import pytest

from indep.errors import ExclusiveAccessError
from indep.handle import SharedHandle


class Counter:
    def __init__(self):
        self.value = 0


class TestSharedHandleBorrow:
    """Tests for shared (read) borrows."""

    def test_borrow_yields_value(self):
        """Test that borrow() yields the wrapped object."""
        counter = Counter()
        handle = SharedHandle(counter)
        with handle.borrow() as value:
            assert value is counter

    def test_multiple_readers_allowed(self):
        """Test that shared borrows can overlap."""
        handle = SharedHandle(Counter())
        with handle.borrow():
            with handle.borrow():
                assert handle.is_borrowed is True
                assert handle.is_mutably_borrowed is False

    def test_borrow_while_mutably_borrowed_fails(self):
        """Test that reading during an exclusive borrow fails fast."""
        handle = SharedHandle(Counter())
        with handle.borrow_mut():
            with pytest.raises(ExclusiveAccessError):
                with handle.borrow():
                    pass

    def test_released_after_block(self):
        """Test that borrows are released on exit."""
        handle = SharedHandle(Counter())
        with handle.borrow():
            pass
        assert handle.is_borrowed is False


class TestSharedHandleBorrowMut:
    """Tests for exclusive borrows."""

    def test_mutation_visible_through_other_handles(self):
        """Test that mutation through the handle reaches every holder."""
        counter = Counter()
        handle = SharedHandle(counter)
        with handle.borrow_mut() as value:
            value.value += 1
        assert counter.value == 1

    def test_nested_mutable_borrow_fails(self):
        """Test that two overlapping exclusive borrows conflict."""
        handle = SharedHandle(Counter())
        with handle.borrow_mut():
            with pytest.raises(ExclusiveAccessError, match="already mutably borrowed"):
                with handle.borrow_mut():
                    pass

    def test_mutable_borrow_while_reading_fails(self):
        """Test that an exclusive borrow conflicts with a live reader."""
        handle = SharedHandle(Counter())
        with handle.borrow():
            with pytest.raises(ExclusiveAccessError, match="reader"):
                with handle.borrow_mut():
                    pass

    def test_released_after_exception(self):
        """Test that an exception inside the block still releases the borrow."""
        handle = SharedHandle(Counter())
        with pytest.raises(ValueError):
            with handle.borrow_mut():
                raise ValueError("boom")
        assert handle.is_borrowed is False
        with handle.borrow_mut():
            pass

    def test_conflict_from_other_thread_fails_fast(self):
        """Test that a conflicting borrow from another thread raises instead of blocking."""
        handle = SharedHandle(Counter())
        errors = []

        def contend():
            try:
                with handle.borrow_mut():
                    pass
            except ExclusiveAccessError as e:
                errors.append(e)

        with handle.borrow_mut():
            worker = threading.Thread(target=contend)
            worker.start()
            worker.join(timeout=5)

        assert not worker.is_alive()
        assert len(errors) == 1


class TestSharedHandleIdentity:
    """Tests for labels and target comparison."""

    def test_default_label_is_type_name(self):
        """Test default label."""
        assert SharedHandle(Counter()).label == "Counter"

    def test_custom_label(self):
        """Test explicit label."""
        assert SharedHandle(Counter(), label="hits").label == "hits"

    def test_shares_target(self):
        """Test that handles over the same object share a target."""
        counter = Counter()
        assert SharedHandle(counter).shares_target(SharedHandle(counter))
        assert not SharedHandle(counter).shares_target(SharedHandle(Counter()))

    def test_repr_shows_state(self):
        """Test that repr reflects borrow state."""
        handle = SharedHandle(Counter())
        assert "free" in repr(handle)
        with handle.borrow_mut():
            assert "mut" in repr(handle)
