"""Simple two-language (en/ko) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "page_title": {
        "ko": "밤하늘 관측 차트",
        "en": "Night Sky Visibility Chart",
    },
    "label_location": {
        "ko": "관측 위치 (위도, 경도)",
        "en": "Observatory Location (lat, lon)",
    },
    "placeholder_location": {
        "ko": "예: 37.5665, 126.9780",
        "en": "e.g. 40.7128, -74.0060",
    },
    "label_date": {
        "ko": "관측 날짜",
        "en": "Observation Date",
    },
    "label_target": {
        "ko": "대상 천체 (적경, 적위)",
        "en": "Target Object (RA, Dec)",
    },
    "placeholder_target": {
        "ko": "예: 5.57, 22.01",
        "en": "e.g. 5.57, 22.01",
    },
    "label_object_name": {
        "ko": "천체 이름 (선택)",
        "en": "Object Name (optional)",
    },
    "placeholder_object_name": {
        "ko": "예: NGC 1553",
        "en": "e.g. NGC 1553",
    },
    "label_window": {
        "ko": "시간 범위",
        "en": "Time window",
    },
    "window_noon": {
        "ko": "전날 정오 → 정오",
        "en": "Noon to noon (night ending on the date)",
    },
    "window_midnight": {
        "ko": "자정 → 자정",
        "en": "Midnight to midnight",
    },
    "btn_generate": {
        "ko": "차트 만들기",
        "en": "Generate Chart",
    },
    "loading_compute": {
        "ko": "✦ 하늘을 계산하는 중",
        "en": "✦ Computing the sky",
    },
    "error_generate": {
        "ko": "차트를 만들 수 없어요: {error}",
        "en": "Error generating chart: {error}",
    },
    "legend_object": {
        "ko": "천체 고도",
        "en": "Object Altitude",
    },
    "legend_moon": {
        "ko": "달 고도",
        "en": "Moon Altitude",
    },
    "legend_airmass": {
        "ko": "대기질량",
        "en": "Airmass",
    },
    "axis_time": {
        "ko": "시간 (시)",
        "en": "Time (hours)",
    },
    "axis_altitude": {
        "ko": "고도 (도)",
        "en": "Altitude (degrees)",
    },
    "hover_illumination": {
        "ko": "달 밝기",
        "en": "Moon lit",
    },
    "summary": {
        "ko": "최고 고도 {max_alt:.1f}° ({max_time}) · 천문박명 이후 관측 가능 {dark_hours}시간 · 달 밝기 {moon:.0%}",
        "en": "Peak altitude {max_alt:.1f}° at {max_time} · {dark_hours} h above the horizon in full darkness · Moon {moon:.0%} lit",
    },
    "summary_best": {
        "ko": "최적 관측 시각: {best}",
        "en": "Best dark-sky time: {best}",
    },
    "summary_never_dark": {
        "ko": "완전한 어둠 속에서 지평선 위로 뜨지 않아요.",
        "en": "Never above the horizon in full darkness.",
    },
    "footer": {
        "ko": "© {year} 밤하늘 관측 차트",
        "en": "© {year} Night Sky Visibility Chart",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
