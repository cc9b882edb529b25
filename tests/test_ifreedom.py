import datetime

from novel_sources.core.scraping.dates import parse_russian_date
from novel_sources.sources.ifreedom import IfreedomMetadata, IfreedomSource

SITE = "https://ifreedom.su"

CATALOG_HTML = """
<div class="item-book-slide">
  <a class="link-book-slide" href="https://ifreedom.su/ranobe/first/" title="Link Title"></a>
  <div class="block-book-slide-img"><img src="https://ifreedom.su/covers/first.jpg"></div>
  <div class="block-book-slide-title"> Первая книга </div>
</div>
<div class="item-book-slide">
  <a class="link-book-slide" href="https://ifreedom.su/ranobe/second/" title="Вторая"></a>
</div>
<div class="item-book-slide">
  <div class="block-book-slide-title">Без ссылки</div>
</div>
"""

NOVEL_HTML = """
<div class="book-img block-book-slide-img"><img src="https://ifreedom.su/covers/x.jpg"></div>
<div class="book-info">
  <h1> Название </h1>
  <div class="genreslist"><a>Фэнтези</a><a> Драма </a></div>
</div>
<div class="group-book-info-list">
  <div class="book-info-list"><span>Книга завершена</span></div>
  <div class="book-info-list"><a>Автор Авторов</a></div>
</div>
<div class="tab-content">
  <div data-name="Описание"> Описание книги </div>
  <div data-name="Главы">
    <div class="chapterinfo">
      <a href="https://ifreedom.su/ranobe/x/glava-3/">Глава 3</a>
      <span class="timechapter">5 марта</span>
    </div>
    <div class="chapterinfo">
      <a href="https://ifreedom.su/ranobe/x/glava-2/">Глава 2</a>
      <span class="timechapter">01.02.2023</span>
    </div>
    <div class="chapterinfo"><a href="">Пустая</a></div>
    <div class="chapterinfo">
      <a href="/ranobe/x/glava-1/">Глава 1</a>
      <span class="timechapter"></span>
    </div>
  </div>
</div>
"""

CHAPTER_HTML = """
<div class="chapter-content"><p>Текст</p><script>ads()</script><div class="pc-adv">реклама</div><img srcset="https://cdn/a.jpg 300w, https://cdn/b.jpg 600w"></div>
"""


def make_source():
    return IfreedomSource(
        IfreedomMetadata(id="ifreedom", source_site=SITE, source_name="iFreedom")
    )


def serve(monkeypatch, pages: dict, requested: list | None = None):
    def fake_fetch(self, path):
        if requested is not None:
            requested.append(path)
        return pages[path]

    monkeypatch.setattr(IfreedomSource, "fetch", fake_fetch)


def test_headers_include_referer():
    headers = make_source().headers
    assert headers["Referer"] == "https://ifreedom.su/vse-knigi/"
    assert "Mozilla" in headers["User-Agent"]


def test_popular_novels(monkeypatch):
    requested = []
    url = "/vse-knigi/?sort=%D0%9F%D0%BE%20%D1%80%D0%B5%D0%B9%D1%82%D0%B8%D0%BD%D0%B3%D1%83&bpage=1"
    serve(monkeypatch, {url: CATALOG_HTML}, requested)

    novels = make_source().popular_novels(1)
    assert [(n.name, n.path) for n in novels] == [
        ("Первая книга", "/ranobe/first/"),
        ("Вторая", "/ranobe/second/"),
    ]
    assert novels[0].cover == "https://ifreedom.su/covers/first.jpg"
    assert novels[1].cover == ""


def test_popular_novels_array_filters(monkeypatch):
    requested = []
    monkeypatch.setattr(
        IfreedomSource,
        "fetch",
        lambda self, path: requested.append(path) or CATALOG_HTML,
    )
    make_source().popular_novels(2, show_latest=True, filters={"genre": ["1", "2"]})
    assert requested[0].endswith("&genre[]=1&genre[]=2&bpage=2")
    assert "%D0%BE%D0%B1%D0%BD%D0%BE%D0%B2%D0%BB%D0%B5%D0%BD%D0%B8%D1%8F" in requested[0]


def test_search_novels(monkeypatch):
    requested = []
    monkeypatch.setattr(
        IfreedomSource,
        "fetch",
        lambda self, path: requested.append(path) or CATALOG_HTML,
    )
    novels = make_source().search_novels("dragon king", 2)
    assert requested == ["/vse-knigi/?searchname=dragon%20king&bpage=2"]
    assert len(novels) == 2


def test_parse_novel(monkeypatch):
    serve(monkeypatch, {"/ranobe/x/": NOVEL_HTML})
    novel = make_source().parse_novel("/ranobe/x/")

    assert novel.name == "Название"
    assert novel.cover == "https://ifreedom.su/covers/x.jpg"
    assert novel.summary == "Описание книги"
    assert novel.genres == "Фэнтези,Драма"
    assert novel.author == "Автор Авторов"
    assert novel.status == "Completed"

    assert [c.path for c in novel.chapters] == [
        "/ranobe/x/glava-1/",
        "/ranobe/x/glava-2/",
        "/ranobe/x/glava-3/",
    ]
    assert [c.chapter_number for c in novel.chapters] == [1, 3, 4]
    assert novel.chapters[0].release_time is None
    assert novel.chapters[1].release_time == "2023-02-01"
    assert novel.chapters[2].release_time.endswith("-03-05")


def test_parse_novel_unknown_author(monkeypatch):
    html = """
    <div class="group-book-info-list">
      <div class="book-info-list"><span>Переводчик</span></div>
      <div class="book-info-list"><div>Не указан</div></div>
    </div>
    """
    serve(monkeypatch, {"/ranobe/y/": html})
    novel = make_source().parse_novel("/ranobe/y/")
    assert novel.author is None
    assert novel.status is None
    assert novel.chapters == []


def test_parse_chapter_cleans_html(monkeypatch):
    serve(monkeypatch, {"/ranobe/x/glava-1/": CHAPTER_HTML})
    html = make_source().parse_chapter("/ranobe/x/glava-1/")
    assert "<p>Текст</p>" in html
    assert "script" not in html
    assert "реклама" not in html
    assert 'src="https://cdn/b.jpg"' in html
    assert "srcset" not in html


def test_parse_russian_date_forms():
    today = datetime.date(2025, 6, 1)
    assert parse_russian_date("5 марта", today=today) == "2025-03-05"
    assert parse_russian_date("01.02.2023") == "2023-02-01"
    assert parse_russian_date("вчера") == "вчера"
    assert parse_russian_date("31.02.2023") == "31.02.2023"
    assert parse_russian_date("") is None
    assert parse_russian_date(None) is None
