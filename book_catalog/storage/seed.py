"""
Sample catalog data for development databases.

The data is generated from a fixed random seed, so every run produces the
same authors, publishers and books. Records that already exist (matched by
author/publisher name or ISBN) are left alone, which makes seeding safe to
repeat.
"""

import random
from dataclasses import dataclass
from datetime import date

from sqlmodel.ext.asyncio.session import AsyncSession

from book_catalog.logging import logger
from book_catalog.models.author import Author
from book_catalog.models.book import Book
from book_catalog.models.publisher import Publisher
from book_catalog.repositories.author_repository import AuthorRepository
from book_catalog.repositories.book_repository import BookRepository
from book_catalog.repositories.publisher_repository import PublisherRepository

AUTHOR_NAMES = (
    "Pramoedya Ananta Toer", "Tere Liye", "Andrea Hirata", "Dee Lestari",
    "Eka Kurniawan", "Leila S. Chudori", "Ahmad Fuadi",
    "Habiburrahman El Shirazy", "Gola Gong", "Raditya Dika", "W.S. Rendra",
    "Chairil Anwar", "Sapardi Djoko Damono", "Maan Abdul", "Boy Candra",
    "Seno Gumira Ajidarma", "Ayu Utami", "N.H. Dini", "Mira W.",
    "Windhy Puspitadewi",
)  # fmt: skip

BOOK_TITLES = (
    "Laskar Pelangi", "Bumi Manusia", "Ayat-Ayat Cinta", "Negeri 5 Menara",
    "Perahu Kertas", "Cantik Itu Luka", "Orang-Orang Bloomington",
    "Sang Pemimpi", "Dilan 1990", "Milea", "Ronggeng Dukuh Paruk",
    "Gadis Pantai", "Laut Bercerita", "Pulang", "Daun yang Jatuh",
    "Rectoverso", "Supernova", "Madre", "Orang Miskin Dilarang Sekolah",
    "Filosofi Kopi",
)  # fmt: skip

BEST_AUTHORS = ("Pramoedya Ananta Toer", "Tere Liye", "Andrea Hirata")

CITIES = (
    "Jakarta", "Bandung", "Yogyakarta", "Surabaya", "Semarang", "Medan",
    "Makassar", "Denpasar", "Malang", "Solo",
)  # fmt: skip

PUBLISHER_WORDS = (
    "Pustaka", "Cahaya", "Nusantara", "Aksara", "Lentera", "Mentari",
    "Samudra", "Pelita", "Cakrawala", "Kencana",
)  # fmt: skip

TITLE_WORDS = (
    "senja", "hujan", "rumah", "jalan", "kota", "laut", "cerita", "malam",
    "mimpi", "pagi", "langit", "hati",
)  # fmt: skip


@dataclass
class SeedReport:
    authors: int = 0
    publishers: int = 0
    books: int = 0


def isbn13(rng: random.Random) -> str:
    """Random ISBN-13 in the 978 prefix with a valid check digit."""
    digits = [9, 7, 8] + [rng.randint(0, 9) for _ in range(9)]
    total = sum(d * (1 if i % 2 == 0 else 3) for i, d in enumerate(digits))
    digits.append((10 - total % 10) % 10)
    return "".join(str(d) for d in digits)


def random_date(rng: random.Random, start: date, end: date) -> date:
    return date.fromordinal(rng.randint(start.toordinal(), end.toordinal()))


def sentence(rng: random.Random, words: int) -> str:
    return " ".join(rng.choice(TITLE_WORDS) for _ in range(words)).capitalize()


async def seed_catalog(
    session: AsyncSession, seed: int = 2025, book_count: int = 100
) -> SeedReport:
    """
    Insert the sample catalog.

    Args:
        session: Session to write with; the caller commits.
        seed: Random seed of the generated values.
        book_count: Number of generated books, on top of one
            "best of" book for each of ``BEST_AUTHORS``.

    Returns:
        Number of records created per entity.
    """
    rng = random.Random(seed)
    report = SeedReport()
    author_repo = AuthorRepository(session)
    publisher_repo = PublisherRepository(session)
    book_repo = BookRepository(session)

    publishers: list[Publisher] = []
    for i in range(20):
        name = f"{PUBLISHER_WORDS[i % 10]} {CITIES[i // 2 % 10]} Publisher"
        city = rng.choice(CITIES)
        year = rng.randint(1950, 2020)
        existing = await publisher_repo.get_all(name=name)
        if existing:
            publishers.append(existing[0])
            continue
        publishers.append(
            await publisher_repo.create(
                Publisher(name=name, city=city, established_year=year)
            )
        )
        report.publishers += 1

    authors: list[Author] = []
    for name in AUTHOR_NAMES:
        birth_date = random_date(rng, date(1920, 1, 1), date(2000, 1, 1))
        biography = sentence(rng, 12) + "."
        existing_author = await author_repo.get_by_name(name)
        if existing_author:
            authors.append(existing_author)
            continue
        authors.append(
            await author_repo.create(
                Author(
                    name=name,
                    birth_date=birth_date,
                    nationality="Indonesia",
                    biography=biography,
                )
            )
        )
        report.authors += 1

    current_year = date.today().year
    for i in range(book_count):
        title = (
            f"{BOOK_TITLES[i]} {sentence(rng, 2)}"
            if i < len(BOOK_TITLES)
            else sentence(rng, 4)
        )
        isbn = isbn13(rng)
        book = Book(
            title=title,
            isbn=isbn,
            published_year=rng.randint(1970, current_year),
            pages=rng.randint(100, 800),
            synopsis=sentence(rng, 30) + ".",
            author_id=rng.choice(authors).id,
            publisher_id=rng.choice(publishers).id,
        )
        if await book_repo.exists(isbn=isbn):
            continue
        await book_repo.create(book)
        report.books += 1

    for author in authors:
        if author.name not in BEST_AUTHORS:
            continue
        title = f"{author.name}: Karya Terbaik Sepanjang Masa"
        isbn = isbn13(rng)
        pages = rng.randint(300, 600)
        if await book_repo.exists(isbn=isbn):
            continue
        await book_repo.create(
            Book(
                title=title,
                isbn=isbn,
                published_year=2024,
                pages=pages,
                synopsis=f"Kumpulan karya terbaik dari {author.name} yang melegenda.",
                author_id=author.id,
                publisher_id=publishers[0].id,
            )
        )
        report.books += 1

    logger.info(
        f"Seeded {report.authors} authors, {report.publishers} publishers "
        f"and {report.books} books"
    )
    return report
