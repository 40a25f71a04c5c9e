"""Sample books loaded by ``plp-seed``."""

from __future__ import annotations

from .types import BookDocument

BOOKS: list[BookDocument] = [
    {
        "title": "To Kill a Mockingbird",
        "author": "Harper Lee",
        "genre": "Fiction",
        "published_year": 1960,
        "price": 12.99,
        "pages": 336,
        "publisher": "J. B. Lippincott & Co.",
        "in_stock": True,
    },
    {
        "title": "1984",
        "author": "George Orwell",
        "genre": "Dystopian",
        "published_year": 1949,
        "price": 10.99,
        "pages": 328,
        "publisher": "Secker & Warburg",
        "in_stock": True,
    },
    {
        "title": "The Great Gatsby",
        "author": "F. Scott Fitzgerald",
        "genre": "Fiction",
        "published_year": 1925,
        "price": 9.99,
        "pages": 180,
        "publisher": "Charles Scribner's Sons",
        "in_stock": True,
    },
    {
        "title": "Brave New World",
        "author": "Aldous Huxley",
        "genre": "Dystopian",
        "published_year": 1932,
        "price": 11.50,
        "pages": 311,
        "publisher": "Chatto & Windus",
        "in_stock": False,
    },
    {
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "genre": "Fantasy",
        "published_year": 1937,
        "price": 14.99,
        "pages": 310,
        "publisher": "George Allen & Unwin",
        "in_stock": True,
    },
    {
        "title": "The Catcher in the Rye",
        "author": "J.D. Salinger",
        "genre": "Fiction",
        "published_year": 1951,
        "price": 8.99,
        "pages": 224,
        "publisher": "Little, Brown and Company",
        "in_stock": True,
    },
    {
        "title": "Pride and Prejudice",
        "author": "Jane Austen",
        "genre": "Romance",
        "published_year": 1813,
        "price": 7.99,
        "pages": 432,
        "publisher": "T. Egerton",
        "in_stock": True,
    },
    {
        "title": "The Lord of the Rings",
        "author": "J.R.R. Tolkien",
        "genre": "Fantasy",
        "published_year": 1954,
        "price": 19.99,
        "pages": 1178,
        "publisher": "Allen & Unwin",
        "in_stock": True,
    },
    {
        "title": "Animal Farm",
        "author": "George Orwell",
        "genre": "Political Satire",
        "published_year": 1945,
        "price": 8.50,
        "pages": 112,
        "publisher": "Secker & Warburg",
        "in_stock": False,
    },
    {
        "title": "The Alchemist",
        "author": "Paulo Coelho",
        "genre": "Fiction",
        "published_year": 1988,
        "price": 10.99,
        "pages": 197,
        "publisher": "HarperOne",
        "in_stock": True,
    },
    {
        "title": "Moby Dick",
        "author": "Herman Melville",
        "genre": "Adventure",
        "published_year": 1851,
        "price": 12.50,
        "pages": 635,
        "publisher": "Harper & Brothers",
        "in_stock": False,
    },
    {
        "title": "Wuthering Heights",
        "author": "Emily Brontë",
        "genre": "Gothic Fiction",
        "published_year": 1847,
        "price": 9.99,
        "pages": 342,
        "publisher": "Thomas Cautley Newby",
        "in_stock": True,
    },
]
