import hashlib

CHUNK_SIZE = 1024 * 1024


def generate_item_key(path):
    """SHA-256 of the photo's bytes, so renamed or moved copies share a cache entry."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()
