"""
Run the catalog API with uvicorn.

Apply migrations first with ``alembic upgrade head``.
"""

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("book_catalog:app", host="0.0.0.0", port=8000)
