import pytest

from conftest import MASTER_PLAYLIST, MEDIA_PLAYLIST
from hls_hasher.converter import PlaylistParser
from hls_hasher.converter.playlist_parser import parse_attribute_list
from hls_hasher.errors import ParseFailure
from hls_hasher.models import Resolution


@pytest.fixture
def parser():
    return PlaylistParser()


class TestMediaPlaylists:
    def test_segments_in_document_order(self, parser):
        manifest = parser.parse(MEDIA_PLAYLIST)
        assert manifest.is_media and not manifest.is_master
        assert [segment.uri for segment in manifest.segments] == ["data000.ts", "data001.ts"]
        assert [segment.duration for segment in manifest.segments] == [10.0, 4.5]

    def test_segment_lines_point_at_uri_lines(self, parser):
        lines = MEDIA_PLAYLIST.splitlines()
        manifest = parser.parse(MEDIA_PLAYLIST)
        for segment in manifest.segments:
            assert lines[segment.line] == segment.uri

    def test_extinf_title_is_kept(self, parser):
        manifest = parser.parse("#EXTM3U\n#EXTINF:6.0,Opening\nintro.ts\n")
        assert manifest.segments[0].title == "Opening"

    def test_crlf_and_byte_order_mark(self, parser):
        text = "\ufeff#EXTM3U\r\n#EXTINF:2,\r\na.ts\r\n#EXTINF:2,\r\nb.ts\r\n"
        manifest = parser.parse(text)
        assert [(segment.uri, segment.line) for segment in manifest.segments] == [("a.ts", 2), ("b.ts", 4)]

    def test_comments_and_blank_lines_between_tag_and_uri(self, parser):
        manifest = parser.parse("#EXTM3U\n\n#EXTINF:2,\n# comment\n#EXT-X-DISCONTINUITY\n\na.ts\n")
        assert manifest.segments[0].uri == "a.ts"
        assert manifest.segments[0].line == 6


class TestMasterPlaylists:
    def test_variants_with_attributes(self, parser):
        manifest = parser.parse(MASTER_PLAYLIST)
        assert manifest.is_master and not manifest.is_media
        first, second = manifest.playlists
        assert first.uri == "stream_0/playlist.m3u8"
        assert first.resolution == Resolution(width=1920, height=1080)
        assert first.bandwidth == 5500000
        assert first.attributes["CODECS"] == "avc1.640028,mp4a.40.2"
        assert second.resolution == Resolution(width=1280, height=720)

    def test_labels_prefer_name_then_resolution_then_index(self, parser):
        text = (
            "#EXTM3U\n"
            '#EXT-X-STREAM-INF:BANDWIDTH=1,NAME="High",RESOLUTION=1920x1080\n'
            "high.m3u8\n"
            "#EXT-X-STREAM-INF:BANDWIDTH=2,RESOLUTION=1280x720\n"
            "mid.m3u8\n"
            "#EXT-X-STREAM-INF:BANDWIDTH=3\n"
            "audio.m3u8\n"
        )
        manifest = parser.parse(text)
        labels = [variant.label(index) for index, variant in enumerate(manifest.playlists)]
        assert labels == ["High", "1280x720", "variant2"]

    def test_unfollowed_uri_tags_are_ignored(self, parser):
        text = (
            "#EXTM3U\n"
            '#EXT-X-MEDIA:TYPE=AUDIO,GROUP-ID="aud",NAME="en",URI="audio/en.m3u8"\n'
            '#EXT-X-STREAM-INF:BANDWIDTH=1,AUDIO="aud"\n'
            "video.m3u8\n"
        )
        manifest = parser.parse(text)
        assert [variant.uri for variant in manifest.playlists] == ["video.m3u8"]


class TestDegenerateAndMalformed:
    def test_header_only_playlist_is_empty(self, parser):
        manifest = parser.parse("#EXTM3U\n#EXT-X-ENDLIST\n")
        assert manifest.is_empty
        assert not manifest.is_master and not manifest.is_media

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "\n\n",
            "#EXTINF:10,\na.ts\n",
            "#EXTM3U\n#EXTINF:ten,\na.ts\n",
            "#EXTM3U\n#EXTINF:10,\n",
            "#EXTM3U\n#EXTINF:10,\n#EXTINF:10,\na.ts\n",
            "#EXTM3U\na.ts\n",
            "#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=1,RESOLUTION=wide\nv.m3u8\n",
            "#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=fast\nv.m3u8\n",
            "#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=1,,CODECS=\"x\"\nv.m3u8\n",
            "#EXTM3U\n#EXT-X-STREAM-INF:BANDWIDTH=1\nv.m3u8\n#EXTINF:10,\na.ts\n",
        ],
        ids=[
            "empty",
            "blank",
            "missing-header",
            "bad-duration",
            "extinf-at-eof",
            "extinf-twice",
            "uri-without-tag",
            "bad-resolution",
            "bad-bandwidth",
            "bad-attribute-list",
            "mixed-master-and-media",
        ],
    )
    def test_raises_parse_failure(self, parser, text):
        with pytest.raises(ParseFailure):
            parser.parse(text)


def test_attribute_list_strips_quotes_and_allows_spaces():
    attributes = parse_attribute_list('BANDWIDTH=800000, CODECS="a,b", NAME=""', 0)
    assert attributes == {"BANDWIDTH": "800000", "CODECS": "a,b", "NAME": ""}
