"""
Tests for frontdesk/services/todo_service.py
"""
import pytest
from datetime import datetime, timedelta

from frontdesk.services.todo_service import TodoService

START = datetime(2026, 3, 1, 8, 0)


class _Clock:
    def __init__(self):
        self.now = START

    def __call__(self):
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def service(db_session):
    return TodoService(db_session, clock=_Clock())


class TestTodos:

    def test_open_items_listed_first(self, service):
        first = service.add_todo("Replace gas cylinder in 104")
        second = service.add_todo("Call plumber")
        third = service.add_todo("Order towels")
        service.complete_todo(third.id, "Tendai")

        assert [t.id for t in service.get_todos()] == [second.id, first.id, third.id]
        assert [t.id for t in service.get_todos(include_completed=False)] == [second.id, first.id]

    def test_complete_records_who_and_when(self, service):
        todo = service.add_todo("  Call plumber  ")
        assert todo.task == "Call plumber"

        done = service.complete_todo(todo.id, " Rudo ")
        assert done.is_completed is True
        assert done.completed_by == "Rudo"
        assert done.completed_at > todo.created_at

    def test_complete_twice_rejected(self, service):
        todo = service.add_todo("Call plumber")
        service.complete_todo(todo.id, "Rudo")
        with pytest.raises(ValueError, match="already completed"):
            service.complete_todo(todo.id, "Rudo")

    def test_blank_values_rejected(self, service):
        with pytest.raises(ValueError, match="enter a task"):
            service.add_todo("   ")
        todo = service.add_todo("Call plumber")
        with pytest.raises(ValueError, match="who completed"):
            service.complete_todo(todo.id, "")

    def test_delete(self, service):
        todo = service.add_todo("Call plumber")
        assert service.delete_todo(todo.id) is True
        assert service.get_todos() == []
        with pytest.raises(ValueError, match="not found"):
            service.delete_todo(todo.id)
