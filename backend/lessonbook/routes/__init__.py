# Routes package init
"""
LessonBook Backend — API Routes Package
=========================================

Route Inventory:
    - collections.py:  /collections/{collection_name}[/limited|/{document_id}]
    - lessons.py:      GET /lessons, PUT /lessons/{document_id}
    - orders.py:       POST /orders (and /order), PUT /order/{document_id}
    - images.py:       GET /images/{file_path}
    - health.py:       GET /health
    - dependencies.py: collection resolver and id parsing shared by the above

Routes stay thin: resolve the collection, validate the body, call a
DocumentService method, wrap the result.
"""
