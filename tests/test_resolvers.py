# -*- coding: utf-8 -*-
"""
Host resolvers against canned upstream responses
"""

import asyncio
import json

import pytest

from post_downloader.exceptions import ResolutionError
from post_downloader.models import AlbumResult, PostContent
from site_resolvers import ResolverSettings, RetryPolicy
from site_resolvers.chevereto_resolver import (IbbAlbumResolver, IbbImageResolver, ImgKiwiAlbumResolver,
                                               ImgKiwiImageResolver, JpgChurchAlbumResolver)
from site_resolvers.file_host_resolvers import (AnonfilesResolver, BoxFolderResolver, BunkrAlbumResolver,
                                                BunkrFileResolver, CyberdropAlbumResolver, CyberfileFileResolver,
                                                CyberfileFolderResolver, EromeAlbumResolver, YandexDiskResolver)
from site_resolvers.gofile_resolver import GofileResolver, hash_password
from site_resolvers.image_host_resolvers import ImagebamResolver, ImgboxGalleryResolver, PixhostGalleryResolver
from site_resolvers.social_resolvers import ImgurResolver, InstagramEmbedResolver, InstagramProfileResolver
from site_resolvers.video_resolvers import (GfycatResolver, NoodleMagazineResolver, PornhubResolver,
                                            RedgifsResolver, SaintEmbedResolver, SpankbangResolver)

from conftest import FakeFetchClient

GOFILE_ROOT = ('https://api.gofile.io/getContent?contentId=XyZ&token=token123'
               '&websiteToken=12345&cache=true')


def gofile_payload(name, contents):
    return json.dumps({'status': 'ok', 'data': {'name': name, 'contents': contents}})


def feed_item(url):
    return {'product_type': 'feed', 'image_versions2': {'candidates': [{'url': url}]}}


def resolve(resolver_class, url, http, context_factory, passwords=()):
    resolver = resolver_class(url, context_factory(http, passwords))
    return asyncio.run(resolver.resolve())


class TestGofileResolver:
    """Content API, password candidates and nested folders"""

    def test_second_password_unlocks_and_no_third_attempt(self, make_context):
        passwords = PostContent(content='', post_id='1', passwords=['abc', 'ABC']).password_candidates()
        assert passwords == ['abc', 'ABC']

        wrong = f"{GOFILE_ROOT}&password={hash_password('abc')}"
        right = f"{GOFILE_ROOT}&password={hash_password('ABC')}"
        http = FakeFetchClient(pages={
            GOFILE_ROOT: '{"status":"error-passwordRequired"}',
            wrong: '{"status":"error-passwordWrong"}',
            right: gofile_payload('Vacation', {
                'f1': {'type': 'file', 'link': 'https://store1.gofile.io/download/f1/a.jpg'},
                'f2': {'type': 'file', 'link': 'https://store1.gofile.io/download/f2/b.jpg'},
            }),
        })

        result = resolve(GofileResolver, 'https://gofile.io/d/XyZ', http, make_context, passwords)

        assert result == AlbumResult(folder_name='Vacation', resolved_urls=[
            'https://store1.gofile.io/download/f1/a.jpg',
            'https://store1.gofile.io/download/f2/b.jpg',
        ])
        assert http.urls() == [GOFILE_ROOT, wrong, right]

    def test_nested_folders_reuse_accepted_password(self, make_context):
        digest = hash_password('secret')
        child = GOFILE_ROOT.replace('contentId=XyZ', 'contentId=child')
        http = FakeFetchClient(pages={
            GOFILE_ROOT: gofile_payload('Root', {
                'f1': {'type': 'file', 'link': 'https://store1.gofile.io/download/f1/a.jpg'},
                'd1': {'type': 'folder', 'code': 'child'},
            }),
            child: '{"status":"error-passwordRequired"}',
            f"{child}&password={digest}": gofile_payload('Child', {
                'f2': {'type': 'file', 'link': 'https://store1.gofile.io/download/f2/c.jpg'},
                'd0': {'type': 'folder', 'code': 'XyZ'},
            }),
        })

        result = resolve(GofileResolver, 'https://gofile.io/d/XyZ', http, make_context, ['secret'])

        assert result.folder_name == 'Root'
        assert result.resolved_urls == ['https://store1.gofile.io/download/f1/a.jpg',
                                        'https://store1.gofile.io/download/f2/c.jpg']
        assert http.urls() == [GOFILE_ROOT, child, f"{child}&password={digest}"]

    def test_all_passwords_rejected(self, make_context):
        http = FakeFetchClient(pages={
            GOFILE_ROOT: '{"status":"error-passwordRequired"}',
            f"{GOFILE_ROOT}&password={hash_password('a')}": '{"status":"error-passwordWrong"}',
            f"{GOFILE_ROOT}&password={hash_password('b')}": '{"status":"error-passwordWrong"}',
        })

        assert resolve(GofileResolver, 'https://gofile.io/d/XyZ', http, make_context, ['a', 'b']) is None

    def test_missing_folder(self, make_context):
        http = FakeFetchClient(pages={GOFILE_ROOT: '{"status":"error-notFound"}'})
        assert resolve(GofileResolver, 'https://gofile.io/d/XyZ', http, make_context) is None

    def test_guest_token_is_created_once(self, make_context):
        settings = ResolverSettings(gofile_token='')
        http = FakeFetchClient(pages={
            'https://api.gofile.io/createAccount': '{"status":"ok","data":{"token":"newtok"}}',
            GOFILE_ROOT.replace('token123', 'newtok'): gofile_payload('Root', {}),
        })
        context = make_context(http)
        context.settings = settings

        result = asyncio.run(GofileResolver('https://gofile.io/d/XyZ', context).resolve())

        assert settings.gofile_token == 'newtok'
        assert result == AlbumResult(folder_name='Root', resolved_urls=[])


class TestCheveretoAlbums:
    """Paginated album listings"""

    def test_follows_next_links_until_revisited(self, make_context):
        page_two = 'https://jpg.church/a/album1/?page=2'
        http = FakeFetchClient(pages={
            'https://jpg.church/a/album1': (
                '<html><head><meta property="og:title" content=" Beach Trip "></head><body>'
                '<div class="list-item-image"><a href="#"><img src="https://simp2.jpg.church/1.md.jpg"></a></div>'
                f'<a data-pagination="next" href="{page_two}">Next</a></body></html>'
            ),
            page_two: (
                '<html><body>'
                '<div class="list-item-image"><a href="#"><img src="https://simp2.jpg.church/2.th.jpg"></a></div>'
                f'<a data-pagination="next" href="{page_two}">Next</a></body></html>'
            ),
        })

        result = resolve(JpgChurchAlbumResolver, 'https://jpg.church/a/album1?sort=date', http, make_context)

        assert result.folder_name == 'Beach Trip'
        assert result.resolved_urls == ['https://simp2.jpg.church/1.jpg', 'https://simp2.jpg.church/2.jpg']
        assert http.urls() == ['https://jpg.church/a/album1', page_two]


class TestPixhostGallery:
    """Share box BBCode"""

    def test_thumbnails_become_full_images(self, make_context):
        bbcode = ('[url=https://pixhost.to/show/1/a.jpg][img]https://t12.pixhost.to/thumbs/1/a.jpg[/img][/url] '
                  '[url=https://pixhost.to/show/2/b.jpg][img]https://t3.pixhost.to/thumbs/2/b.jpg[/img][/url]')
        http = FakeFetchClient(pages={
            'https://pixhost.to/gallery/AbC': (
                '<div class="link"><h2>My Gallery</h2></div>'
                f'<div class="share"><div>links</div><div><input value="{bbcode}"></div></div>'
            ),
        })

        result = resolve(PixhostGalleryResolver, 'https://pixhost.to/gallery/AbC', http, make_context)

        assert result.folder_name == 'My Gallery'
        assert result.resolved_urls == ['https://img12.pixhost.to/images/1/a.jpg',
                                        'https://img3.pixhost.to/images/2/b.jpg']


PORNHUB_PAGE = (
    '<html><body><script>'
    'var flashvars_1 = {};'
    'var ra="https://www.pornhub.com/video/get_media?s=";var rb="abc";'
    'var media_1=ra + /* noise */ rb;'
    '</script></body></html>'
)


class TestPornhubRetry:
    """Bounded retry around a flaky upstream"""

    def test_retries_until_media_definitions_appear(self, make_context):
        view = 'https://pornhub.com/view_video.php?viewkey=1'
        http = FakeFetchClient(pages={
            view: ['<html><body>please wait</body></html>', PORNHUB_PAGE],
            'https://www.pornhub.com/video/get_media?s=abc': json.dumps([
                {'quality': '720', 'videoUrl': 'https://cdn.example/720.mp4'},
                {'quality': '1080', 'videoUrl': 'https://cdn.example/1080.mp4'},
            ]),
        })

        result = resolve(PornhubResolver, 'https://de.pornhub.com/view_video.php?viewkey=1', http, make_context)

        assert result == 'https://cdn.example/1080.mp4'
        assert http.urls().count(view) == 2

    def test_gives_up_after_configured_attempts(self, make_context, resolver_settings):
        view = 'https://pornhub.com/view_video.php?viewkey=1'
        http = FakeFetchClient(pages={view: '<html><body>please wait</body></html>'})

        result = resolve(PornhubResolver, view, http, make_context)

        assert result is None
        assert http.urls().count(view) == resolver_settings.pornhub_retry.attempts


class TestRetryPolicy:
    def test_returns_first_result(self):
        calls = []

        async def attempt():
            calls.append(1)
            return 'done' if len(calls) == 2 else None

        assert asyncio.run(RetryPolicy(attempts=5, delay=0).run(attempt)) == 'done'
        assert len(calls) == 2


class TestImgur:
    """s9e embeds"""

    def test_album_embed_uses_api(self, make_context):
        http = FakeFetchClient(pages={
            'https://api.imgur.com/3/album/Abc.json': json.dumps({'data': {
                'title': 'Cats',
                'images': [{'link': 'https://i.imgur.com/1.jpg'}, {'link': 'https://i.imgur.com/2.mp4'}],
            }}),
        })

        result = resolve(ImgurResolver, 'https://s9e.github.io/iframe/2/imgur.min.html#a/Abc', http, make_context)

        assert result == AlbumResult(folder_name='Cats',
                                     resolved_urls=['https://i.imgur.com/1.jpg', 'https://i.imgur.com/2.mp4'])

    def test_single_embed_prefers_video(self, make_context):
        http = FakeFetchClient(pages={
            'https://imgur.com/Xyz': ('<meta property="og:image" content="https://i.imgur.com/Xyz.jpg">'
                                      '<meta property="og:video" content="https://i.imgur.com/Xyz.mp4">'),
        })

        result = resolve(ImgurResolver, 'https://s9e.github.io/iframe/2/imgur.min.html#Xyz', http, make_context)

        assert result == 'https://i.imgur.com/Xyz.mp4'


class TestInstagramProfile:
    """Feed pagination"""

    def test_pages_until_no_more(self, make_context):
        feed = 'https://www.instagram.com/api/v1/feed/user/42/?count=100'
        http = FakeFetchClient(pages={
            'https://instagram.com/someone': '<script>{"profile_id":"42"}</script>',
            feed: json.dumps({'status': 'ok', 'num_results': 1, 'more_available': True,
                              'next_max_id': 'c1', 'user': {'full_name': 'Some One'},
                              'items': [feed_item('https://cdn.example/1.jpg')]}),
            f'{feed}&max_id=c1': json.dumps({'status': 'ok', 'num_results': 1, 'more_available': False,
                                             'items': [{'product_type': 'clips',
                                                        'video_versions': [{'url': 'https://cdn.example/2.mp4'}]}]}),
        })

        result = resolve(InstagramProfileResolver, 'https://instagram.com/someone', http, make_context)

        assert result == AlbumResult(folder_name='Some One',
                                     resolved_urls=['https://cdn.example/1.jpg', 'https://cdn.example/2.mp4'])

    def test_malformed_items_are_skipped(self, make_context):
        feed = 'https://www.instagram.com/api/v1/feed/user/42/?count=100'
        http = FakeFetchClient(pages={
            'https://instagram.com/someone': '<script>{"profile_id":"42"}</script>',
            feed: json.dumps({'status': 'ok', 'num_results': 4, 'more_available': False, 'items': [
                {'product_type': 'feed'},
                {'product_type': 'carousel_container', 'carousel_media': [
                    {'image_versions2': {'candidates': []}},
                    feed_item('https://cdn.example/2.jpg'),
                ]},
                {'product_type': 'clips', 'video_versions': 'missing'},
                'not an item',
                feed_item('https://cdn.example/3.jpg'),
            ]}),
        })

        result = resolve(InstagramProfileResolver, 'insta: @someone', http, make_context)

        assert result == AlbumResult(folder_name='someone',
                                     resolved_urls=['https://cdn.example/2.jpg', 'https://cdn.example/3.jpg'])

    def test_unexpected_feed_payload(self, make_context):
        http = FakeFetchClient(pages={
            'https://instagram.com/someone': '<script>{"profile_id":"42"}</script>',
            'https://www.instagram.com/api/v1/feed/user/42/?count=100': '[]',
        })
        assert resolve(InstagramProfileResolver, 'https://instagram.com/someone', http, make_context) is None


INSTAGRAM_EMBED = 'https://s9e.github.io/iframe/2/instagram.min.html#Cx1#theme=dark'


class TestInstagramEmbed:
    """Video URLs from the embed page"""

    def test_single_video(self, make_context):
        http = FakeFetchClient(pages={
            'https://www.instagram.com/p/Cx1/embed': (
                r'<script>window.data = {"shortcode_media": {"is_video":true,'
                r'"video_url":"https://cdn.example/v.mp4?a=1&b=2"}};</script>'
            ),
        })

        assert resolve(InstagramEmbedResolver, INSTAGRAM_EMBED, http, make_context) == 'https://cdn.example/v.mp4?a=1&b=2'

    def test_several_videos_become_an_album(self, make_context):
        http = FakeFetchClient(pages={
            'https://www.instagram.com/p/Cx1/embed': (
                '<script>{"shortcode_media": {"is_video":true, "video_url":"https://cdn.example/1.mp4",'
                ' "children": [{"video_url":"https://cdn.example/2.mp4"}]}}</script>'
            ),
        })

        result = resolve(InstagramEmbedResolver, INSTAGRAM_EMBED, http, make_context)

        assert result == AlbumResult(folder_name=None,
                                     resolved_urls=['https://cdn.example/1.mp4', 'https://cdn.example/2.mp4'])

    def test_image_post_gives_nothing(self, make_context):
        http = FakeFetchClient(pages={
            'https://www.instagram.com/p/Cx1/embed': '<script>{"shortcode_media": {"is_video":false}}</script>',
        })
        assert resolve(InstagramEmbedResolver, INSTAGRAM_EMBED, http, make_context) is None


def next_data(payload):
    return f'<script id="__NEXT_DATA__" type="application/json">{payload}</script>'


class TestBunkr:
    """__NEXT_DATA__ pages and the build id API"""

    def test_images_need_no_request(self, make_context, fake_http):
        result = resolve(BunkrFileResolver, 'https://cdn3.bunkr.is/pic.jpg', fake_http, make_context)

        assert result == 'https://i3.bunkr.is/pic.jpg'
        assert fake_http.requests == []

    def test_file_from_page_data(self, make_context):
        http = FakeFetchClient(pages={
            'https://stream.bunkr.is/v/clip.mp4': next_data(json.dumps({'props': {'pageProps': {'file': {
                'name': 'clip.mp4', 'mediafiles': 'https://media-files12.bunkr.is'}}}})),
        })

        result = resolve(BunkrFileResolver, 'https://stream.bunkr.is/v/clip.mp4', http, make_context)

        assert result == 'https://media-files12.bunkr.is/clip.mp4'

    def test_file_from_build_id_api(self, make_context):
        http = FakeFetchClient(pages={
            'https://stream.bunkr.is/v/clip.mp4': next_data('{"buildId": "b1", "props": {"pageProps": {}}}'),
            'https://stream.bunkr.is/_next/data/b1/v/clip.mp4.json': json.dumps({'pageProps': {'file': {
                'name': 'clip.mp4', 'mediafiles': 'https://media-files2.bunkr.is'}}}),
        })

        result = resolve(BunkrFileResolver, 'https://stream.bunkr.is/v/clip.mp4', http, make_context)

        assert result == 'https://media-files2.bunkr.is/clip.mp4'

    @pytest.mark.parametrize('payload', ['{oops', '[1, 2]', '{"props": "none"}'])
    def test_malformed_page_data(self, make_context, payload):
        http = FakeFetchClient(pages={'https://stream.bunkr.is/v/clip.mp4': next_data(payload)})
        assert resolve(BunkrFileResolver, 'https://stream.bunkr.is/v/clip.mp4', http, make_context) is None

    def test_bad_api_payload(self, make_context):
        http = FakeFetchClient(pages={
            'https://stream.bunkr.is/v/clip.mp4': next_data('{"buildId": "b1"}'),
            'https://stream.bunkr.is/_next/data/b1/v/clip.mp4.json': 'not json',
        })
        assert resolve(BunkrFileResolver, 'https://stream.bunkr.is/v/clip.mp4', http, make_context) is None

    def test_album(self, make_context):
        http = FakeFetchClient(pages={
            'https://bunkr.is/a/Xy': '<h1 id="title">Party</h1>' + next_data(json.dumps({'props': {'pageProps': {
                'album': {'files': [{'cdn': 'https://cdn9.bunkr.is', 'name': 'a.jpg'}, {'name': 'nocdn.jpg'}, 'junk']},
            }}})),
        })

        result = resolve(BunkrAlbumResolver, 'https://bunkr.is/a/Xy', http, make_context)

        assert result == AlbumResult(folder_name='Party', resolved_urls=['https://media-files9.bunkr.is/a.jpg'])

    def test_album_with_malformed_data(self, make_context):
        http = FakeFetchClient(pages={
            'https://bunkr.is/a/Xy': next_data('{"props": {"pageProps": {"album": "gone"}}}'),
        })

        result = resolve(BunkrAlbumResolver, 'https://bunkr.is/a/Xy', http, make_context)

        assert result == AlbumResult(folder_name='Xy', resolved_urls=[])


CYBERFILE_DETAILS = 'https://cyberfile.is/account/ajax/file_details'
CYBERFILE_LOAD = 'https://cyberfile.is/account/ajax/load_files'
CYBERFILE_FOLDER_PAGE = '<script>$(\'a[data-toggle="tab"]\').click(); loadImages(\'folder\', \'555\', 1);</script>'


class TestCyberfile:
    """Ajax file details and folder listings"""

    def test_file(self, make_context):
        http = FakeFetchClient(
            pages={'https://cyberfile.is/Ab12': '<a onclick="showFileInformation(77)">info</a>'},
            posts={CYBERFILE_DETAILS: "<button onclick=\"openUrl('https:\\/\\/cyberfile.is\\/dl\\/x.zip')\">"},
        )

        result = resolve(CyberfileFileResolver, 'https://cyberfile.is/Ab12', http, make_context)

        assert result == 'https://cyberfile.is/dl/x.zip'
        assert http.requests[-1] == ('POST', CYBERFILE_DETAILS, 'u=77')

    def test_file_without_id(self, make_context):
        http = FakeFetchClient(pages={'https://cyberfile.is/Ab12': '<p>removed</p>'})
        with pytest.raises(ResolutionError):
            resolve(CyberfileFileResolver, 'https://cyberfile.is/Ab12', http, make_context)

    def test_folder(self, make_context):
        http = FakeFetchClient(
            pages={
                'https://cyberfile.is/folder/abc': CYBERFILE_FOLDER_PAGE,
                'https://cyberfile.is/f1': '<a onclick="showFileInformation(1)">info</a>',
            },
            posts={
                CYBERFILE_LOAD: json.dumps({'page_title': 'Stuff',
                                            'html': '<div dtfullurl="https://cyberfile.is/f1"></div>'}),
                CYBERFILE_DETAILS: "openUrl('https://cyberfile.is/dl/f1.zip')",
            },
        )

        result = resolve(CyberfileFolderResolver, 'https://cyberfile.is/folder/abc', http, make_context)

        assert result == AlbumResult(folder_name='Stuff', resolved_urls=['https://cyberfile.is/dl/f1.zip'])
        assert ('POST', CYBERFILE_LOAD, 'pageType=folder&nodeId=555') in http.requests

    @pytest.mark.parametrize('listing', ['[]', 'not json'])
    def test_folder_with_malformed_listing(self, make_context, listing):
        http = FakeFetchClient(
            pages={'https://cyberfile.is/folder/abc': CYBERFILE_FOLDER_PAGE},
            posts={CYBERFILE_LOAD: listing},
        )
        with pytest.raises(ResolutionError):
            resolve(CyberfileFolderResolver, 'https://cyberfile.is/folder/abc', http, make_context)


YANDEX_STORE = '<script type="application/json" id="store-prefetch">{}</script>'


class TestYandexDisk:
    """store-prefetch state and the download-url API"""

    def test_download_url(self, make_context):
        store = json.dumps({'environment': {'sk': 's1'}, 'resources': {'r1': {'hash': 'h1'}}})
        http = FakeFetchClient(
            pages={'https://disk.yandex.ru/d/abc': YANDEX_STORE.format(store)},
            posts={'https://disk.yandex.ru/public/api/download-url':
                   '{"data": {"url": "https://downloader.disk.yandex.ru/x"}}'},
        )

        result = resolve(YandexDiskResolver, 'https://disk.yandex.ru/d/abc', http, make_context)

        assert result == 'https://downloader.disk.yandex.ru/x'
        assert json.loads(http.requests[-1][2]) == {'hash': 'h1', 'sk': 's1'}

    def test_error_answer(self, make_context):
        store = json.dumps({'environment': {'sk': 's1'}, 'resources': {'r1': {'hash': 'h1'}}})
        http = FakeFetchClient(
            pages={'https://disk.yandex.ru/d/abc': YANDEX_STORE.format(store)},
            posts={'https://disk.yandex.ru/public/api/download-url': '{"error": true}'},
        )
        assert resolve(YandexDiskResolver, 'https://disk.yandex.ru/d/abc', http, make_context) is None

    def test_malformed_store(self, make_context):
        http = FakeFetchClient(pages={'https://disk.yandex.ru/d/abc': YANDEX_STORE.format('[]')})
        with pytest.raises(ResolutionError):
            resolve(YandexDiskResolver, 'https://disk.yandex.ru/d/abc', http, make_context)

    def test_store_without_resources(self, make_context):
        http = FakeFetchClient(pages={
            'https://disk.yandex.ru/d/abc': YANDEX_STORE.format('{"environment": {"sk": "s1"}, "resources": {"r1": 5}}'),
        })

        assert resolve(YandexDiskResolver, 'https://disk.yandex.ru/d/abc', http, make_context) is None
        assert http.urls('POST') == []


class TestFileHostPages:
    """Single page file hosts and listings"""

    def test_erome_album(self, make_context):
        http = FakeFetchClient(pages={
            'https://www.erome.com/a/Qq': (
                '<div class="col-sm-12 page-content"><h1>Beach</h1></div>'
                '<div class="media-group"><img class="img-front" data-src="https://s1.erome.com/1.jpg"></div>'
                '<div class="media-group"><video><source src="https://v1.erome.com/2.mp4"></video></div>'
                '<div class="media-group"><img class="img-front"></div>'
            ),
        })

        result = resolve(EromeAlbumResolver, 'https://www.erome.com/a/Qq', http, make_context)

        assert result == AlbumResult(folder_name='Beach',
                                     resolved_urls=['https://s1.erome.com/1.jpg', 'https://v1.erome.com/2.mp4'])

    def test_erome_missing_page(self, make_context, fake_http):
        result = resolve(EromeAlbumResolver, 'https://www.erome.com/a/Qq', fake_http, make_context)
        assert result == AlbumResult(folder_name=None, resolved_urls=[])

    def test_box_folder(self, make_context):
        http = FakeFetchClient(pages={
            'https://m.box.com/shared_item/x': (
                '<span class="folder-nav-title">Docs</span>'
                '<a class="files-item-anchor" href="/file/1">1</a>'
                '<a class="files-item-anchor" href="/file/2">2</a>'
                '<a class="files-item-anchor" href="/file/3">3</a>'
            ),
            'https://m.box.com/file/1': '<img class="image-preview" src="/img/1.jpg">',
            'https://m.box.com/file/2': '<div class="mtl"><a href="/dl/2.pdf">Download</a></div>',
        })

        result = resolve(BoxFolderResolver, 'https://m.box.com/shared_item/x', http, make_context)

        assert result == AlbumResult(folder_name='Docs',
                                     resolved_urls=['https://m.box.com/img/1.jpg', 'https://m.box.com/dl/2.pdf'])

    def test_cyberdrop_album(self, make_context):
        http = FakeFetchClient(pages={
            'https://cyberdrop.me/a/xyz': (
                '<h1 id="title">Set</h1>'
                '<a id="file" href="https://fs-04.cyberdrop.me/a.jpg">a</a>'
                '<a id="file" href="https://img-02.cyberdrop.me/b.jpg">b</a>'
                '<a id="file">broken</a>'
            ),
        })

        result = resolve(CyberdropAlbumResolver, 'https://cyberdrop.me/a/xyz', http, make_context)

        assert result == AlbumResult(folder_name='Set', resolved_urls=[
            'https://fs-01.cyberdrop.me/a.jpg', 'https://fs-01.cyberdrop.me/b.jpg'])

    def test_anonfiles(self, make_context):
        http = FakeFetchClient(pages={
            'https://anonfiles.com/Ab/x_zip': '<a id="download-url" href=" https://cdn-1.anonfiles.com/x.zip ">dl</a>',
        })
        assert resolve(AnonfilesResolver, 'https://anonfiles.com/Ab/x_zip', http, make_context) == \
            'https://cdn-1.anonfiles.com/x.zip'

    def test_anonfiles_removed_file(self, make_context):
        http = FakeFetchClient(pages={'https://anonfiles.com/Ab/x_zip': '<p>File not found</p>'})
        assert resolve(AnonfilesResolver, 'https://anonfiles.com/Ab/x_zip', http, make_context) is None


class TestImageHostPages:
    """Gallery and view pages of image hosts"""

    def test_imgbox_gallery(self, make_context):
        http = FakeFetchClient(pages={
            'https://imgbox.com/g/abc': (
                '<div id="gallery-view"><h1>Cats</h1><div id="gallery-view-content">'
                '<a href="#"><img src="https://thumbs2.imgbox.com/ab/cd/x_b.png"></a>'
                '<a href="#"><img></a></div></div>'
            ),
        })

        result = resolve(ImgboxGalleryResolver, 'https://imgbox.com/g/abc', http, make_context)

        assert result == AlbumResult(folder_name='Cats', resolved_urls=['https://images2.imgbox.com/ab/cd/x_o.png'])

    def test_imagebam_view_sends_nsfw_cookie(self, make_context):
        http = FakeFetchClient(pages={
            'https://www.imagebam.com/view/ME1': '<img class="main-image" src="https://images4.imagebam.com/1.jpg">',
        })

        result = resolve(ImagebamResolver, 'https://www.imagebam.com/view/ME1', http, make_context)

        assert result == 'https://images4.imagebam.com/1.jpg'
        assert http.requests[0][2]['cookie'].startswith('nsfw_inter=1;')

    def test_imagebam_gallery(self, make_context):
        links = ('[URL=https://www.imagebam.com/view/ME1][IMG]t1[/IMG][/URL] '
                 '[URL=https://www.imagebam.com/view/ME2][IMG]t2[/IMG][/URL]')
        http = FakeFetchClient(pages={
            'https://www.imagebam.com/gallery/G1': (
                '<h1 id="gallery-name">Trip</h1><div class="links gallery"><div>share</div>'
                f'<div><div><input value="{links}"></div></div></div>'
            ),
            'https://www.imagebam.com/view/ME1': '<img class="main-image" src="https://images4.imagebam.com/1.jpg">',
        })

        result = resolve(ImagebamResolver, 'https://www.imagebam.com/gallery/G1', http, make_context)

        assert result == AlbumResult(folder_name='Trip', resolved_urls=['https://images4.imagebam.com/1.jpg'])

    def test_imagebam_gallery_without_links(self, make_context):
        http = FakeFetchClient(pages={'https://www.imagebam.com/gallery/G1': '<h1 id="gallery-name">Trip</h1>'})

        result = resolve(ImagebamResolver, 'https://www.imagebam.com/gallery/G1', http, make_context)

        assert result == AlbumResult(folder_name='Trip', resolved_urls=[])

    def test_ibb_image(self, make_context):
        http = FakeFetchClient(pages={
            'https://ibb.co/abc123': '<div class="image-viewer-container"><img src="https://i.ibb.co/x/a.jpg"></div>',
        })
        assert resolve(IbbImageResolver, 'https://ibb.co/abc123', http, make_context) == 'https://i.ibb.co/x/a.jpg'

    def test_ibb_image_missing(self, make_context, fake_http):
        assert resolve(IbbImageResolver, 'https://ibb.co/abc123', fake_http, make_context) is None

    def test_ibb_album(self, make_context):
        http = FakeFetchClient(pages={
            'https://ibb.co/album/Xy': (
                '<meta property="og:title" content="Holiday ">'
                '<div class="image-container"><img src="https://i.ibb.co/1.md.jpg"></div>'
                '<div class="image-container"><img src="https://i.ibb.co/2.jpg"></div>'
            ),
        })

        result = resolve(IbbAlbumResolver, 'https://ibb.co/album/Xy', http, make_context)

        assert result == AlbumResult(folder_name='Holiday',
                                     resolved_urls=['https://i.ibb.co/1.jpg', 'https://i.ibb.co/2.jpg'])

    def test_img_kiwi_image(self, make_context):
        http = FakeFetchClient(pages={
            'https://img.kiwi/image/abc': '<meta property="og:image" content="https://img.kiwi/images/abc.png">',
        })
        assert resolve(ImgKiwiImageResolver, 'https://img.kiwi/image/abc', http, make_context) == \
            'https://img.kiwi/images/abc.png'

    def test_img_kiwi_album(self, make_context):
        http = FakeFetchClient(pages={
            'https://img.kiwi/album/xyz': (
                '<meta property="og:title" content="Birds">'
                '<div class="image-container"><img src="https://img.kiwi/images/1.th.png"></div>'
            ),
        })

        result = resolve(ImgKiwiAlbumResolver, 'https://img.kiwi/album/xyz', http, make_context)

        assert result == AlbumResult(folder_name='Birds', resolved_urls=['https://img.kiwi/images/1.png'])

    def test_img_kiwi_album_without_title(self, make_context, fake_http):
        with pytest.raises(ResolutionError):
            resolve(ImgKiwiAlbumResolver, 'https://img.kiwi/album/xyz', fake_http, make_context)


class TestVideoHostPages:
    """Player pages, playlists and embeds"""

    def test_spankbang_best_quality(self, make_context):
        http = FakeFetchClient(pages={
            'https://spankbang.com/abc/video/title': (
                "<script>var stream_data = {'240p': ['https://sb.example/240.mp4'], "
                "'720p': ['https://sb.example/720.mp4'], '4k': []};</script>"
            ),
        })

        result = resolve(SpankbangResolver, 'https://spankbang.com/abc/video/title', http, make_context)

        assert result == 'https://sb.example/720.mp4'

    @pytest.mark.parametrize('page', [
        '<p>removed</p>',
        '<script>var stream_data = {broken};</script>',
        '<script>var stream_data = {"720p": "x"}["a"];</script>',
    ])
    def test_spankbang_malformed_stream_data(self, make_context, page):
        http = FakeFetchClient(pages={'https://spankbang.com/abc/video/title': page})
        with pytest.raises(ResolutionError):
            resolve(SpankbangResolver, 'https://spankbang.com/abc/video/title', http, make_context)

    def test_noodlemagazine_playlist(self, make_context):
        http = FakeFetchClient(pages={
            'https://noodlemagazine.com/watch/-123': '<iframe id="iplayer" src="/player/-123"></iframe>',
            'https://noodlemagazine.com/playlist/-123': '{"sources": [{"file": "https://cdn.example/1080.mp4"}]}',
        })

        result = resolve(NoodleMagazineResolver, 'https://noodlemagazine.com/watch/-123', http, make_context)

        assert result == 'https://cdn.example/1080.mp4'

    @pytest.mark.parametrize('playlist', ['{"sources": "none"}', '{"sources": []}', '[1]'])
    def test_noodlemagazine_malformed_playlist(self, make_context, playlist):
        http = FakeFetchClient(pages={
            'https://noodlemagazine.com/watch/-123': '<iframe id="iplayer" src="/player/-123"></iframe>',
            'https://noodlemagazine.com/playlist/-123': playlist,
        })
        assert resolve(NoodleMagazineResolver, 'https://noodlemagazine.com/watch/-123', http, make_context) is None

    def test_redgifs_watch_page(self, make_context):
        http = FakeFetchClient(pages={
            'https://redgifs.com/watch/happycat': (
                '<meta property="og:video" content="https://thumbs.redgifs.com/HappyCat.mp4?a=1&amp;b=2">'
            ),
        })

        result = resolve(RedgifsResolver, 'https://redgifs.com/ifr/happycat', http, make_context)

        assert result == 'https://thumbs.redgifs.com/HappyCat.mp4?a=1&b=2'

    def test_redgifs_without_video(self, make_context, fake_http):
        assert resolve(RedgifsResolver, 'https://redgifs.com/ifr/happycat', fake_http, make_context) is None

    def test_gfycat_prefers_giant_source(self, make_context):
        http = FakeFetchClient(pages={
            'https://gfycat.com/SoftCat?hd=1': (
                '<video><source src="https://thumbs.gfycat.com/SoftCat-mobile.mp4">'
                '<source src="https://giant.gfycat.com/SoftCat.mp4"></video>'
            ),
        })

        result = resolve(GfycatResolver, 'https://gfycat.com/ifr/SoftCat?autoplay=1', http, make_context)

        assert result == 'https://giant.gfycat.com/SoftCat.mp4'

    def test_gfycat_without_giant_source(self, make_context):
        http = FakeFetchClient(pages={
            'https://gfycat.com/SoftCat?hd=1': '<video><source src="https://thumbs.gfycat.com/SoftCat-mobile.mp4"></video>',
        })
        assert resolve(GfycatResolver, 'https://gfycat.com/ifr/SoftCat', http, make_context) is None

    def test_saint_embed(self, make_context):
        http = FakeFetchClient(pages={
            'https://saint.to/embed/abc': '<video><source src="https://data.saint.to/x.mp4" type="video/mp4"></video>',
        })
        assert resolve(SaintEmbedResolver, 'https://saint.to/embed/abc', http, make_context) == \
            'https://data.saint.to/x.mp4'

    def test_saint_embed_missing(self, make_context, fake_http):
        assert resolve(SaintEmbedResolver, 'https://saint.to/embed/abc', fake_http, make_context) is None
