from improv_agenda.core.slug import MAX_LENGTH, slugify, unique_slug


def test_slugify_transliterates_and_joins_words():
    assert slugify("Les Improvisateurs d'Été") == "les-improvisateurs-d-ete"
    assert slugify("  LIGUE  d'impro -- Paris ") == "ligue-d-impro-paris"


def test_slugify_empty_input():
    assert slugify("  !!! ") == "n-a"
    assert slugify("") == "n-a"


def test_slugify_truncates():
    assert slugify("a" * 150) == "a" * MAX_LENGTH


def test_unique_slug_appends_counter():
    assert unique_slug("Ligue", set()) == "ligue"
    assert unique_slug("Ligue", {"ligue"}) == "ligue-1"
    assert unique_slug("Ligue", {"ligue", "ligue-1"}) == "ligue-2"


def test_unique_slug_respects_max_length():
    slug = unique_slug("a" * 150, {"a" * MAX_LENGTH})
    assert len(slug) == MAX_LENGTH
    assert slug.endswith("-1")


def test_slugify_transliterates_letters_without_decomposition():
    assert slugify("Straße") == "strasse"
    assert slugify("Øresund Impro") == "oresund-impro"
    assert slugify("Œuvre") == "oeuvre"


def test_slugify_transliterates_non_latin_scripts():
    assert slugify("Москва Импро") == "moskva-impro"
    assert unique_slug("Москва Импро", {"moskva-impro"}) == "moskva-impro-1"
