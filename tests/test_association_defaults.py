import pytest

from infuser.models.associations import has_many
from infuser.models.base import Record


class Cinema(Record):
    movies = has_many()
    buses = has_many()
    quizzes = has_many()
    wives = has_many()
    line_series = has_many()
    invoice_analyses = has_many()
    categories = has_many()
    line_statuses = has_many()
    people = has_many()
    invoice_items = has_many()


class Movie(Record):
    __schema__ = ("title", "cinema_id")


@pytest.mark.parametrize("association, target", [
    ("movies", "Movie"),
    ("buses", "Bus"),
    ("quizzes", "Quiz"),
    ("wives", "Wife"),
    ("line_series", "LineSeries"),
    ("invoice_analyses", "InvoiceAnalysis"),
    ("categories", "Category"),
    ("line_statuses", "LineStatus"),
    ("people", "Person"),
    ("invoice_items", "InvoiceItem"),
])
def test_default_target_is_the_singular_class_name(association, target):
    assert Cinema.associations()[association].target_name == target


def test_default_foreign_key_uses_underscored_owner_name():
    class HTTPRequestLog(Record):
        entries = has_many()

    assert HTTPRequestLog.associations()["entries"].foreign_key == "http_request_log_id"
    assert Cinema.associations()["movies"].foreign_key == "cinema_id"


def test_irregular_plural_resolves_registered_target(store):
    store.insert(Movie, {"id": 1, "title": "Alien", "cinema_id": 3})
    cinema = Cinema.from_row({"id": 3}, store=store)

    assert [movie.title for movie in cinema.movies] == ["Alien"]
