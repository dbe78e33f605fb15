"""
Response normalizer for booru search APIs.
Maps the post and tag payloads of each API family onto PostRecord / TagRecord.
"""
import logging
import re
from typing import Any, Callable, Optional
from xml.etree.ElementTree import Element

from defusedxml import DTDForbidden, EntitiesForbidden, ExternalReferenceForbidden
from defusedxml import ElementTree as ET

from ..models.schemas import ApiFamily, PostRecord, TagRecord
from ..utils.string_utils import get_base_url, get_domain

logger = logging.getLogger(__name__)


# Provider name -> API family
PROVIDER_FAMILIES: dict[str, ApiFamily] = {
    "yandere": ApiFamily.MOEBOORU,
    "konachan": ApiFamily.MOEBOORU,
    "lolibooru": ApiFamily.MOEBOORU,
    "sakugabooru": ApiFamily.MOEBOORU,
    "danbooru": ApiFamily.DANBOORU,
    "aibooru": ApiFamily.DANBOORU,
    "gelbooru": ApiFamily.GELBOORU,
    "safebooru": ApiFamily.GELBOORU,
    "tbib": ApiFamily.GELBOORU,
    "rule34": ApiFamily.GELBOORU_NSFW,
    "xbooru": ApiFamily.GELBOORU_NSFW,
    "hypnohub": ApiFamily.GELBOORU_NSFW,
    "e621": ApiFamily.E621,
    "e926": ApiFamily.E621,
    "derpibooru": ApiFamily.PHILOMENA,
    "furbooru": ApiFamily.PHILOMENA,
    "ponybooru": ApiFamily.PHILOMENA,
    "paheal": ApiFamily.SHIMMIE,
    "wallhaven": ApiFamily.WALLHAVEN,
    "waifu.im": ApiFamily.WAIFU_IM,
    "nekos.best": ApiFamily.NEKOS_BEST,
    "zerochan": ApiFamily.ZEROCHAN,
    "sankaku": ApiFamily.SANKAKU,
}

# Site host -> provider name, for providers given as a URL
PROVIDER_HOSTS: dict[str, str] = {
    "yande.re": "yandere",
    "konachan.com": "konachan",
    "konachan.net": "konachan",
    "lolibooru.moe": "lolibooru",
    "sakugabooru.com": "sakugabooru",
    "danbooru.donmai.us": "danbooru",
    "aibooru.online": "aibooru",
    "gelbooru.com": "gelbooru",
    "safebooru.org": "safebooru",
    "tbib.org": "tbib",
    "api.rule34.xxx": "rule34",
    "rule34.xxx": "rule34",
    "xbooru.com": "xbooru",
    "hypnohub.net": "hypnohub",
    "e621.net": "e621",
    "e926.net": "e926",
    "derpibooru.org": "derpibooru",
    "furbooru.org": "furbooru",
    "ponybooru.org": "ponybooru",
    "rule34.paheal.net": "paheal",
    "wallhaven.cc": "wallhaven",
    "api.waifu.im": "waifu.im",
    "nekos.best": "nekos.best",
    "zerochan.net": "zerochan",
    "capi-v2.sankakucomplex.com": "sankaku",
}

# Image hosts that refuse hotlinking (no direct load, or referer required)
BLOCKED_SOURCE_HOSTS = ("twitter.com", "x.com", "pixiv.net", "pximg.net")

PAHEAL_BASE_URL = "https://rule34.paheal.net"

E621_TAG_CATEGORIES = ("general", "species", "character", "artist", "copyright")

ZEROCHAN_FALLBACK_EXTS = (".png", ".gif", ".jpeg", ".webp")


def provider_name(provider: str) -> Optional[str]:
    """Resolve a provider name or site URL to a known provider name."""
    key = provider.lower().strip()
    if key in PROVIDER_FAMILIES:
        return key
    host = get_domain(key)
    return PROVIDER_HOSTS.get(host) if host else None


def family_for_provider(provider: str) -> ApiFamily:
    """Look up the API family of a provider by name or site URL."""
    name = provider_name(provider)
    if name is None:
        raise ValueError(f"Unknown provider: {provider}")
    return PROVIDER_FAMILIES[name]


def get_working_image_source(source: Any) -> Optional[str]:
    """Return the source URL if it can be loaded directly, else None."""
    if not source or not isinstance(source, str):
        return None
    for host in BLOCKED_SOURCE_HOSTS:
        if host in source:
            return None
    return source


def get_file_ext_from_url(url: Optional[str]) -> str:
    """
    Extract the file extension from a URL, ignoring any query string.

    Handles signed URLs like https://example.com/file.mp4?token=abc123.
    """
    if not url:
        return "jpg"
    query_idx = url.find("?")
    if query_idx > 0:
        url = url[:query_idx]
    ext = url.split(".")[-1]
    return ext.lower() if ext else "jpg"


def _post_id(item: dict, index: int) -> int | str:
    post_id = item.get("id")
    return index if post_id is None else post_id


def _aspect_ratio(width: Any, height: Any) -> float:
    if width and height:
        return width / height
    return 1


def _parse_int(value: Optional[str]) -> int:
    """Parse leading digits of an attribute value, 0 when there are none."""
    if not value:
        return 0
    match = re.match(r"\s*([+-]?\d+)", value)
    return int(match.group(1)) if match else 0


def _tag_names(tags: Any) -> str:
    """Join the names of tag objects ({"name": ...}) with spaces."""
    if not isinstance(tags, list):
        return ""
    names = [t["name"] for t in tags if isinstance(t, dict) and t.get("name")]
    return " ".join(names)


def _items(response: Any, key: Optional[str] = None) -> list[dict]:
    """Return the dict items of a list payload (optionally under key)."""
    if key is not None:
        response = response.get(key) if isinstance(response, dict) else None
    if not isinstance(response, list):
        return []
    return [item for item in response if isinstance(item, dict)]


class ResponseNormalizer:
    """Normalizes raw booru API responses into PostRecord / TagRecord lists."""

    def __init__(self):
        self._post_mappers: dict[ApiFamily, Callable[..., list[PostRecord]]] = {
            ApiFamily.MOEBOORU: self._moebooru_posts,
            ApiFamily.DANBOORU: self._danbooru_posts,
            ApiFamily.GELBOORU: self._gelbooru_posts,
            ApiFamily.GELBOORU_NSFW: self._gelbooru_nsfw_posts,
            ApiFamily.E621: self._e621_posts,
            ApiFamily.PHILOMENA: self._philomena_posts,
            ApiFamily.SHIMMIE: self._shimmie_posts,
            ApiFamily.WALLHAVEN: self._wallhaven_posts,
            ApiFamily.WAIFU_IM: self._waifu_im_posts,
            ApiFamily.NEKOS_BEST: self._nekos_best_posts,
            ApiFamily.ZEROCHAN: self._zerochan_posts,
            ApiFamily.SANKAKU: self._sankaku_posts,
        }
        self._tag_mappers: dict[ApiFamily, Callable[[Any], list[TagRecord]]] = {
            ApiFamily.MOEBOORU: self._count_tags,
            ApiFamily.DANBOORU: self._post_count_tags,
            ApiFamily.GELBOORU: self._gelbooru_tags,
            ApiFamily.GELBOORU_NSFW: self._autocomplete_tags,
            ApiFamily.E621: self._post_count_tags,
            ApiFamily.PHILOMENA: self._philomena_tags,
            ApiFamily.WALLHAVEN: self._no_tags,
            ApiFamily.WAIFU_IM: self._waifu_im_tags,
            ApiFamily.ZEROCHAN: self._zerochan_tags,
            ApiFamily.SANKAKU: self._sankaku_tags,
        }

    def normalize_posts(
        self,
        family: ApiFamily | str,
        response: Any,
        sfw_only: bool = False,
        site_url: Optional[str] = None
    ) -> list[PostRecord]:
        """
        Normalize a post search response.

        Args:
            family: API family (or its value) the response came from
            response: Decoded JSON payload, or XML text for shimmie
            sfw_only: Provider only serves safe posts (e926); forces is_nsfw off
            site_url: Site the response came from; shimmie resolves relative
                preview paths against it (defaults to paheal)

        Returns:
            Normalized posts; payloads of an unexpected shape yield []
        """
        family = ApiFamily(family)
        if family == ApiFamily.E621:
            posts = self._e621_posts(response, sfw_only=sfw_only)
        elif family == ApiFamily.SHIMMIE:
            posts = self._shimmie_posts(response, site_url=site_url)
        else:
            posts = self._post_mappers[family](response)
        logger.debug(f"Normalized {len(posts)} {family.value} posts")
        return posts

    def normalize_tags(
        self,
        family: ApiFamily | str,
        response: Any,
        autocomplete: bool = False
    ) -> list[TagRecord]:
        """
        Normalize a tag search response.

        Args:
            family: API family (or its value) the response came from
            response: Decoded JSON payload
            autocomplete: Response uses the gelbooru autocomplete format
                ([{"label": "name (123)", "value": "name"}])

        Returns:
            Normalized tags; families without a tag endpoint yield []
        """
        family = ApiFamily(family)
        if autocomplete:
            return self._autocomplete_tags(response)
        mapper = self._tag_mappers.get(family, self._no_tags)
        return mapper(response)

    # ------------------------------------------------------------------
    # Moebooru: yandere, konachan, lolibooru, sakugabooru
    # ------------------------------------------------------------------

    def _moebooru_posts(self, response: Any) -> list[PostRecord]:
        result = []
        for i, item in enumerate(_items(response)):
            file_url = item.get("file_url")
            if not file_url:
                continue
            rating = item.get("rating") or "s"
            result.append(PostRecord(
                id=_post_id(item, i),
                width=item.get("width") or 0,
                height=item.get("height") or 0,
                aspect_ratio=_aspect_ratio(item.get("width"), item.get("height")),
                tags=item.get("tags") or "",
                rating=rating,
                is_nsfw=rating != "s",
                md5=item.get("md5") or "",
                preview_url=item.get("preview_url") or file_url,
                sample_url=item.get("sample_url") or file_url,
                file_url=file_url,
                file_ext=item.get("file_ext") or get_file_ext_from_url(file_url),
                source=get_working_image_source(item.get("source")) or file_url,
            ))
        return result

    # ------------------------------------------------------------------
    # Danbooru: danbooru, aibooru
    # ------------------------------------------------------------------

    def _danbooru_posts(self, response: Any) -> list[PostRecord]:
        result = []
        for i, item in enumerate(_items(response)):
            file_url = item.get("file_url")
            # Deleted/banned posts keep their metadata but are not viewable
            if not file_url or item.get("is_deleted") or item.get("is_banned"):
                continue
            width = item.get("image_width") or 0
            height = item.get("image_height") or 0
            rating = item.get("rating") or "s"
            result.append(PostRecord(
                id=_post_id(item, i),
                width=width,
                height=height,
                aspect_ratio=_aspect_ratio(width, height),
                tags=item.get("tag_string") or "",
                rating=rating,
                is_nsfw=rating in ("q", "e"),
                md5=item.get("md5") or "",
                preview_url=item.get("preview_file_url") or file_url,
                sample_url=item.get("large_file_url") or file_url,
                file_url=file_url,
                file_ext=item.get("file_ext") or get_file_ext_from_url(file_url),
                source=get_working_image_source(item.get("source")) or file_url,
            ))
        return result

    # ------------------------------------------------------------------
    # Gelbooru 0.2: gelbooru, safebooru, tbib (+ NSFW-only variant)
    # ------------------------------------------------------------------

    def _gelbooru_post(self, item: dict, index: int, rating: str) -> PostRecord:
        file_url = item["file_url"]
        return PostRecord(
            id=_post_id(item, index),
            width=item.get("width") or 0,
            height=item.get("height") or 0,
            aspect_ratio=_aspect_ratio(item.get("width"), item.get("height")),
            tags=item.get("tags") or "",
            rating=rating,
            is_nsfw=rating != "s",
            md5=item.get("md5") or item.get("hash") or "",
            preview_url=item.get("preview_url") or file_url,
            sample_url=item.get("sample_url") or file_url,
            file_url=file_url,
            file_ext=get_file_ext_from_url(file_url),
            source=get_working_image_source(item.get("source")) or file_url,
        )

    def _gelbooru_posts(self, response: Any) -> list[PostRecord]:
        # gelbooru.com wraps posts in "post", the others return a bare list
        if isinstance(response, dict) and response.get("post"):
            response = response["post"]

        result = []
        for i, item in enumerate(_items(response)):
            if not item.get("file_url"):
                continue
            raw_rating = item.get("rating")
            if isinstance(raw_rating, str) and raw_rating:
                rating = raw_rating.replace("general", "s", 1)[0]
            else:
                rating = "s"
            result.append(self._gelbooru_post(item, i, rating))
        return result

    def _gelbooru_nsfw_posts(self, response: Any) -> list[PostRecord]:
        # rule34 answers with a plain error string when authentication fails
        if isinstance(response, str):
            logger.warning(f"Gelbooru auth error: {response}")
            return []

        return [
            self._gelbooru_post(item, i, "e")
            for i, item in enumerate(_items(response))
            if item.get("file_url")
        ]

    def _gelbooru_tags(self, response: Any) -> list[TagRecord]:
        if isinstance(response, dict) and response.get("tag"):
            response = response["tag"]
        return self._count_tags(response)

    def _autocomplete_tags(self, response: Any) -> list[TagRecord]:
        if not isinstance(response, list):
            return []
        result = []
        for item in response:
            item = item if isinstance(item, dict) else {}
            count = 0
            label = item.get("label")
            if isinstance(label, str):
                match = re.search(r"\((\d+)\)", label)
                if match:
                    count = int(match.group(1))
            result.append(TagRecord(name=item.get("value") or "", count=count))
        return result

    # ------------------------------------------------------------------
    # e621: e621, e926
    # ------------------------------------------------------------------

    def _e621_posts(self, response: Any, sfw_only: bool = False) -> list[PostRecord]:
        result = []
        for i, item in enumerate(_items(response, "posts")):
            file = item.get("file")
            if not isinstance(file, dict) or not file.get("url"):
                continue
            file_url = file["url"]

            tag_parts: list[str] = []
            tags = item.get("tags")
            if isinstance(tags, dict):
                for category in E621_TAG_CATEGORIES:
                    if isinstance(tags.get(category), list):
                        tag_parts.extend(tags[category])

            sources = item.get("sources")
            source_url = sources[0] if isinstance(sources, list) and sources else None
            preview = item.get("preview") or {}
            sample = item.get("sample") or {}
            rating = item.get("rating") or "s"

            result.append(PostRecord(
                id=_post_id(item, i),
                width=file.get("width") or 0,
                height=file.get("height") or 0,
                aspect_ratio=_aspect_ratio(file.get("width"), file.get("height")),
                tags=" ".join(tag_parts),
                rating=rating,
                is_nsfw=False if sfw_only else rating in ("q", "e"),
                md5=file.get("md5") or "",
                preview_url=preview.get("url") or file_url,
                sample_url=sample.get("url") or file_url,
                file_url=file_url,
                file_ext=file.get("ext") or "jpg",
                source=get_working_image_source(source_url) or file_url,
            ))
        return result

    # ------------------------------------------------------------------
    # Philomena: derpibooru, furbooru, ponybooru
    # ------------------------------------------------------------------

    def _philomena_posts(self, response: Any) -> list[PostRecord]:
        result = []
        for i, item in enumerate(_items(response, "images")):
            view_url = item.get("view_url")
            if not view_url:
                continue

            tags = item.get("tags") if isinstance(item.get("tags"), list) else []
            # safe / suggestive / questionable / explicit live in the tag list
            if "explicit" in tags:
                rating = "e"
            elif "questionable" in tags or "suggestive" in tags:
                rating = "q"
            else:
                rating = "s"

            representations = item.get("representations") or {}
            sha512 = item.get("sha512_hash")
            source_url = item.get("source_url")

            result.append(PostRecord(
                id=_post_id(item, i),
                width=item.get("width") or 0,
                height=item.get("height") or 0,
                aspect_ratio=_aspect_ratio(item.get("width"), item.get("height")),
                tags=" ".join(tags),
                rating=rating,
                is_nsfw=rating in ("q", "e"),
                md5=sha512[:32] if sha512 else "",
                preview_url=representations.get("thumb") or view_url,
                sample_url=representations.get("large") or view_url,
                file_url=view_url,
                file_ext=item.get("format") or get_file_ext_from_url(view_url),
                source=source_url if source_url else view_url,
            ))
        return result

    def _philomena_tags(self, response: Any) -> list[TagRecord]:
        return [
            TagRecord(
                name=item.get("name") or item.get("slug") or "",
                count=item.get("images") or 0,
            )
            for item in _items(response, "tags")
        ]

    # ------------------------------------------------------------------
    # Shimmie (XML): paheal
    # ------------------------------------------------------------------

    def _shimmie_posts(self, response: Any, site_url: Optional[str] = None) -> list[PostRecord]:
        # Relative preview paths resolve against the site the response came from
        base_url = (get_base_url(site_url) if site_url else None) or PAHEAL_BASE_URL
        if response is None or response == "" or response == b"":
            return []
        if isinstance(response, Element):
            root = response
        else:
            try:
                root = ET.fromstring(response)
            except ET.ParseError as e:
                logger.warning(f"Invalid shimmie XML: {e}")
                return []
            except (DTDForbidden, EntitiesForbidden, ExternalReferenceForbidden) as e:
                logger.warning(f"Refusing shimmie XML with declarations: {e}")
                return []

        result = []
        for element in root.iter("tag"):
            file_url = element.get("file_url")
            if not file_url:
                continue
            preview_path = element.get("preview_url")
            if preview_path and preview_path.startswith("http"):
                preview_url = preview_path
            else:
                preview_url = base_url + (preview_path or "")
            width = _parse_int(element.get("width"))
            height = _parse_int(element.get("height"))

            result.append(PostRecord(
                id=_parse_int(element.get("id")),
                width=width,
                height=height,
                aspect_ratio=_aspect_ratio(width, height),
                tags=element.get("tags") or "",
                rating="e",
                is_nsfw=True,
                md5=element.get("md5") or "",
                preview_url=preview_url,
                sample_url=file_url,
                file_url=file_url,
                file_ext=get_file_ext_from_url(element.get("file_name") or "unknown.jpg"),
                source=file_url,
            ))
        return result

    # ------------------------------------------------------------------
    # Wallhaven
    # ------------------------------------------------------------------

    def _wallhaven_posts(self, response: Any) -> list[PostRecord]:
        purity_ratings = {"sfw": "s", "sketchy": "q"}
        result = []
        for i, item in enumerate(_items(response, "data")):
            path = item.get("path")
            if not path:
                continue
            thumbs = item.get("thumbs") or {}
            purity = item.get("purity")
            result.append(PostRecord(
                id=item.get("id") or i,
                width=item.get("dimension_x") or 0,
                height=item.get("dimension_y") or 0,
                aspect_ratio=_aspect_ratio(item.get("dimension_x"), item.get("dimension_y")),
                tags=_tag_names(item.get("tags")),
                rating=purity_ratings.get(purity, "e"),
                is_nsfw=purity == "nsfw",
                md5=str(item.get("id") or ""),
                preview_url=thumbs.get("small") or path,
                sample_url=thumbs.get("large") or path,
                file_url=path,
                file_ext=get_file_ext_from_url(path),
                source=item.get("source") or path,
            ))
        return result

    # ------------------------------------------------------------------
    # waifu.im
    # ------------------------------------------------------------------

    def _waifu_im_posts(self, response: Any) -> list[PostRecord]:
        result = []
        for i, item in enumerate(_items(response, "images")):
            url = item.get("url")
            if not url:
                continue
            is_nsfw = bool(item.get("is_nsfw"))
            result.append(PostRecord(
                id=item.get("image_id") or i,
                width=item.get("width") or 0,
                height=item.get("height") or 0,
                aspect_ratio=_aspect_ratio(item.get("width"), item.get("height")),
                tags=_tag_names(item.get("tags")),
                rating="e" if is_nsfw else "s",
                is_nsfw=is_nsfw,
                md5=item.get("md5") or "",
                preview_url=item.get("sample_url") or url,
                sample_url=url,
                file_url=url,
                file_ext=item.get("extension") or "jpg",
                source=get_working_image_source(item.get("source")) or url,
            ))
        return result

    def _waifu_im_tags(self, response: Any) -> list[TagRecord]:
        # Tag endpoint returns two name lists: versatile and nsfw
        if not isinstance(response, dict):
            return []
        result = []
        for key in ("versatile", "nsfw"):
            names = response.get(key)
            if isinstance(names, list):
                result.extend(TagRecord(name=str(name)) for name in names)
        return result

    # ------------------------------------------------------------------
    # nekos.best
    # ------------------------------------------------------------------

    def _nekos_best_posts(self, response: Any) -> list[PostRecord]:
        result = []
        for i, item in enumerate(_items(response, "results")):
            url = item.get("url")
            if not url:
                continue
            ext = get_file_ext_from_url(url)
            query_idx = url.find("?")
            url_path = url[:query_idx] if query_idx > 0 else url
            filename = url_path.split("/")[-1].replace("." + ext, "", 1)
            result.append(PostRecord(
                id=i,
                # No dimensions in the API
                width=1000,
                height=1000,
                aspect_ratio=1,
                tags="neko anime",
                rating="s",
                is_nsfw=False,
                md5=filename,
                preview_url=url,
                sample_url=url,
                file_url=url,
                file_ext=ext,
                source=item.get("source_url") or url,
            ))
        return result

    # ------------------------------------------------------------------
    # Zerochan
    # ------------------------------------------------------------------

    def _zerochan_posts(self, response: Any) -> list[PostRecord]:
        result = []
        for i, item in enumerate(_items(response, "items")):
            # Full images may be jpg, png, gif, jpeg or webp and the API does not
            # say which: guess jpg and hand the rest over as fallbacks
            main_tag = (item.get("tag") or "Image").replace(" ", ".")
            post_id = item.get("id") or i
            base_full_url = f"https://static.zerochan.net/{main_tag}.full.{post_id}"

            tags = item.get("tag") or ""
            if isinstance(item.get("tags"), list):
                extra = " ".join(item["tags"])
                tags = f"{tags} {extra}" if tags else extra

            result.append(PostRecord(
                id=post_id,
                width=item.get("width") or 0,
                height=item.get("height") or 0,
                aspect_ratio=_aspect_ratio(item.get("width"), item.get("height")),
                tags=tags,
                rating="s",
                is_nsfw=False,
                md5=item.get("md5") or "",
                preview_url=item.get("thumbnail") or f"https://s3.zerochan.net/240/00/00/{post_id}.jpg",
                sample_url=f"https://s1.zerochan.net/{main_tag}.600.{post_id}.jpg",
                file_url=base_full_url + ".jpg",
                file_url_fallbacks=[base_full_url + ext for ext in ZEROCHAN_FALLBACK_EXTS],
                file_ext="jpg",
                source=item.get("source") or f"https://www.zerochan.net/{post_id}",
            ))
        return result

    def _zerochan_tags(self, response: Any) -> list[TagRecord]:
        return [
            TagRecord(
                name=item.get("name") or item.get("tag") or "",
                count=item.get("count") or item.get("total") or 0,
            )
            for item in _items(response)
        ]

    # ------------------------------------------------------------------
    # Sankaku (beta API)
    # ------------------------------------------------------------------

    def _sankaku_posts(self, response: Any) -> list[PostRecord]:
        result = []
        for i, item in enumerate(_items(response)):
            file_url = item.get("file_url")
            # redirect_to_signup means the URLs are withheld without an account
            if not file_url or item.get("redirect_to_signup"):
                continue

            file_type = item.get("file_type") or ""
            ext = item.get("file_ext") or get_file_ext_from_url(file_url)
            is_video = "video" in file_type or ext in ("mp4", "webm")
            # Video previews are AVIF and get converted later; images use the WebP sample
            if is_video:
                preview_url = item.get("preview_url") or file_url
            else:
                preview_url = item.get("sample_url") or file_url
            rating = item.get("rating") or "s"

            result.append(PostRecord(
                id=_post_id(item, i),
                width=item.get("width") or 0,
                height=item.get("height") or 0,
                aspect_ratio=_aspect_ratio(item.get("width"), item.get("height")),
                tags=_tag_names(item.get("tags")),
                rating=rating,
                is_nsfw=rating != "s",
                md5=item.get("md5") or "",
                preview_url=preview_url,
                sample_url=item.get("sample_url") or file_url,
                file_url=file_url,
                file_ext=ext,
                file_size=item.get("file_size") or 0,
                source=get_working_image_source(item.get("source")) or file_url,
            ))
        return result

    def _sankaku_tags(self, response: Any) -> list[TagRecord]:
        return [
            TagRecord(name=item.get("name") or "", count=item.get("count") or item.get("post_count") or 0)
            for item in _items(response)
        ]

    # ------------------------------------------------------------------
    # Shared tag layouts
    # ------------------------------------------------------------------

    def _count_tags(self, response: Any) -> list[TagRecord]:
        return [
            TagRecord(name=item.get("name") or "", count=item.get("count") or 0)
            for item in _items(response)
        ]

    def _post_count_tags(self, response: Any) -> list[TagRecord]:
        return [
            TagRecord(name=item.get("name") or "", count=item.get("post_count") or 0)
            for item in _items(response)
        ]

    def _no_tags(self, response: Any) -> list[TagRecord]:
        return []


# Singleton instance
_normalizer: Optional[ResponseNormalizer] = None


def get_response_normalizer() -> ResponseNormalizer:
    """Get singleton instance of response normalizer."""
    global _normalizer
    if _normalizer is None:
        _normalizer = ResponseNormalizer()
    return _normalizer
