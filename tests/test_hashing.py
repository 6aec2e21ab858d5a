import hashlib

from hls_hasher.utils.hashing import artifact_name, content_hash

EMPTY_SHA256 = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"


def test_content_hash_is_sha256_hex():
    assert content_hash(b"") == EMPTY_SHA256
    assert content_hash(b"segment") == hashlib.sha256(b"segment").hexdigest()


def test_content_hash_is_repeatable():
    data = bytes(range(256)) * 4
    assert content_hash(data) == content_hash(bytes(data))


def test_text_is_hashed_as_utf8():
    text = "#EXTM3U\n#EXTINF:10,Ünïcode\nseg.ts\n"
    assert content_hash(text) == content_hash(text.encode("utf-8"))


def test_digest_is_lowercase_hex():
    digest = content_hash(b"abc")
    assert len(digest) == 64
    assert digest == digest.lower()
    int(digest, 16)


def test_artifact_name():
    assert artifact_name("ab12", "ts") == "ab12.ts"
    assert artifact_name("ab12", "m3u8") == "ab12.m3u8"
