"""
Front-desk todo routes
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from frontdesk.database import get_db
from frontdesk.models.schemas import TodoCreate, TodoComplete, TodoResponse
from frontdesk.services.todo_service import TodoService

router = APIRouter(prefix="/todos", tags=["todos"])


@router.get("", response_model=List[TodoResponse])
def list_todos(include_completed: bool = True, db: Session = Depends(get_db)):
    return TodoService(db).get_todos(include_completed)


@router.post("", response_model=TodoResponse, status_code=201)
def add_todo(data: TodoCreate, db: Session = Depends(get_db)):
    try:
        return TodoService(db).add_todo(data.task)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/{todo_id}/complete", response_model=TodoResponse)
def complete_todo(todo_id: int, data: TodoComplete, db: Session = Depends(get_db)):
    service = TodoService(db)
    if not service.get_todo(todo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    try:
        return service.complete_todo(todo_id, data.completed_by)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.delete("/{todo_id}")
def delete_todo(todo_id: int, db: Session = Depends(get_db)):
    service = TodoService(db)
    if not service.get_todo(todo_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")
    service.delete_todo(todo_id)
    return {"message": "Task deleted"}
