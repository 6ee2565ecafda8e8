"""
Todo service
Shared front-desk todo list
"""
from typing import List, Optional, Callable
from datetime import datetime
import logging
from sqlalchemy.orm import Session
from frontdesk.models.ontology import StaffTodo

logger = logging.getLogger(__name__)


class TodoService:
    """Todo service"""

    def __init__(self, db: Session, clock: Callable[[], datetime] = datetime.now):
        self.db = db
        self._clock = clock

    def get_todos(self, include_completed: bool = True) -> List[StaffTodo]:
        """Open items first, newest first within each group"""
        query = self.db.query(StaffTodo)
        if not include_completed:
            query = query.filter(StaffTodo.is_completed == False)  # noqa: E712
        return query.order_by(
            StaffTodo.is_completed, StaffTodo.created_at.desc(), StaffTodo.id.desc()
        ).all()

    def get_todo(self, todo_id: int) -> Optional[StaffTodo]:
        return self.db.query(StaffTodo).filter(StaffTodo.id == todo_id).first()

    def add_todo(self, task: str) -> StaffTodo:
        if not task or not task.strip():
            raise ValueError("Please enter a task")

        todo = StaffTodo(task=task.strip(), is_completed=False, created_at=self._clock())
        self.db.add(todo)
        self.db.commit()
        self.db.refresh(todo)
        return todo

    def complete_todo(self, todo_id: int, completed_by: str) -> StaffTodo:
        if not completed_by or not completed_by.strip():
            raise ValueError("Please enter who completed the task")

        todo = self.get_todo(todo_id)
        if not todo:
            raise ValueError("Task not found")
        if todo.is_completed:
            raise ValueError("Task already completed")

        todo.is_completed = True
        todo.completed_at = self._clock()
        todo.completed_by = completed_by.strip()
        self.db.commit()
        self.db.refresh(todo)
        logger.info(f"Todo {todo.id} completed by {todo.completed_by}")
        return todo

    def delete_todo(self, todo_id: int) -> bool:
        todo = self.get_todo(todo_id)
        if not todo:
            raise ValueError("Task not found")

        self.db.delete(todo)
        self.db.commit()
        return True
