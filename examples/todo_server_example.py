#!/usr/bin/env python3
"""
TODO API server example for xizlr

Controllers are plain classes whose method names follow the REST naming
convention; the application routes every request to them and serves them
with Uvicorn or Hypercorn.

Run with:
    python examples/todo_server_example.py
    python examples/todo_server_example.py --server hypercorn --port 9000

Then try:
    curl -X POST localhost:8000/todos -d '{"title": "Write docs"}'
    curl localhost:8000/todos
    curl -I localhost:8000/todos/1
    curl localhost:8000/todos/1/notes
"""

import argparse
import logging
import sys
from typing import Any, Dict

from xizlr import BaseController, Module, RestApplication, ServiceProvider
from xizlr.util import uuid_v4


class TodoStore:
    """In-memory storage for demo purposes."""

    def __init__(self, application_runtime):
        self.owner = application_runtime.get_name()
        self.todos: Dict[str, Dict[str, Any]] = {}
        self.notes: Dict[str, list] = {}
        self.next_id = 1

    def close(self):
        logging.getLogger(__name__).info(f"Dropping {len(self.todos)} todos")
        self.todos.clear()


class TodoServiceProvider(ServiceProvider):
    def get_services(self):
        return {"todo_store": TodoStore}


class TodoController(BaseController):
    """Handles /todos, /todos/{id} and /todos/{id}/notes."""

    def __init__(self, todo_store):
        self.store = todo_store

    def getTodos(self, request, response):
        completed = (request.query_params or {}).get("completed")
        result = list(self.store.todos.values())
        if completed is not None:
            is_completed = completed.lower() == "true"
            result = [todo for todo in result if todo["completed"] == is_completed]
        return {"owner": self.store.owner, "todos": result, "total": len(result)}

    def createTodo(self, request, response):
        data = request.get_json() or {}
        if "title" not in data:
            return response.set_json({"error": "Title is required"}, status_code=400)

        todo = {
            "id": str(self.store.next_id),
            "title": data["title"],
            "completed": data.get("completed", False),
        }
        self.store.todos[todo["id"]] = todo
        self.store.next_id += 1
        return response.set_json(todo, status_code=201)

    def getTodo(self, id, request, response):
        if id not in self.store.todos:
            return response.set_json({"error": "Todo not found"}, status_code=404)
        return self.store.todos[id]

    def editTodo(self, id, request, response):
        if id not in self.store.todos:
            return response.set_json({"error": "Todo not found"}, status_code=404)
        self.store.todos[id].update(request.get_json() or {})
        return self.store.todos[id]

    def todoExists(self, id, request, response):
        response.status_code = 200 if id in self.store.todos else 404

    def deleteTodo(self, id, request, response):
        self.store.todos.pop(id, None)
        response.status_code = 204

    # snake_case names work as well as camelCase ones
    def get_todo_notes(self, request, response):
        return self.store.notes.get(request.path_params["id"], [])

    def create_todo_note(self, request, response):
        note = {"id": uuid_v4(), **(request.get_json() or {})}
        self.store.notes.setdefault(request.path_params["id"], []).append(note)
        return response.set_json(note, status_code=201)


class HealthController(BaseController):
    """Handles /health by overriding the collection operation."""

    def get_collection(self, request, response):
        return {"status": "healthy"}


class TodoModule(Module):
    def get_service_provider(self):
        return TodoServiceProvider()


def create_todo_app(name: str = "todo-api") -> RestApplication:
    """Create and bootstrap the TODO application."""
    app = RestApplication({"todos": TodoController, "health": HealthController}, name=name)
    app.bootstrap()
    app.register_modules([TodoModule])
    return app


def main():
    """Main function to run the server."""
    parser = argparse.ArgumentParser(description="xizlr TODO API Server")
    parser.add_argument(
        "--server",
        choices=["uvicorn", "hypercorn"],
        default="uvicorn",
        help="HTTP server to use (default: uvicorn)"
    )
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to (default: 8000)")
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error"],
        default="info",
        help="Log level (default: info)"
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper())

    app = create_todo_app()

    print(f"Starting {args.server} server for {app.name} on http://{args.host}:{args.port}")
    print()
    print("Available endpoints:")
    print("  GET    /todos                - List todos")
    print("  POST   /todos                - Create todo")
    print("  GET    /todos/{id}           - Get todo")
    print("  PUT    /todos/{id}           - Update todo")
    print("  HEAD   /todos/{id}           - Check a todo exists")
    print("  DELETE /todos/{id}           - Delete todo")
    print("  GET    /todos/{id}/notes     - List notes of a todo")
    print("  POST   /todos/{id}/notes     - Add a note to a todo")
    print("  GET    /health               - Health check")
    print()

    try:
        app.run(host=args.host, port=args.port, server=args.server, log_level=args.log_level)
    except ImportError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nServer stopped.")


if __name__ == "__main__":
    main()
