"""Browser-side helper scripts injected into every frame."""

# Guarded so repeated injection into the same document is a no-op
DOM_SCRIPTS = """
if (!window.__aiBrowserA11yInjected) {
window.__aiBrowserA11yInjected = true;

window.getNodeFromXpath = function(xpath) {
    return document.evaluate(
        xpath,
        document.documentElement,
        null,
        XPathResult.FIRST_ORDERED_NODE_TYPE,
        null
    ).singleNodeValue;
};

window.canElementScroll = function(elem) {
    if (typeof elem.scrollTo !== "function") {
        return false;
    }

    try {
        const originalTop = elem.scrollTop;

        elem.scrollTo({ top: originalTop + 100, left: 0, behavior: "instant" });

        if (elem.scrollTop === originalTop) {
            return false;
        }

        elem.scrollTo({ top: originalTop, left: 0, behavior: "instant" });
        return true;
    } catch (error) {
        return false;
    }
};

window.getScrollableElements = function(topN) {
    const docEl = document.documentElement;
    const scrollableElements = [docEl];

    for (const elem of document.querySelectorAll("*")) {
        const overflowY = window.getComputedStyle(elem).overflowY;
        const isPotentiallyScrollable =
            overflowY === "auto" || overflowY === "scroll" || overflowY === "overlay";

        if (isPotentiallyScrollable) {
            const candidateScrollDiff = elem.scrollHeight - elem.clientHeight;
            if (candidateScrollDiff > 0 && window.canElementScroll(elem)) {
                scrollableElements.push(elem);
            }
        }
    }

    scrollableElements.sort((a, b) => b.scrollHeight - a.scrollHeight);

    return topN !== undefined ? scrollableElements.slice(0, topN) : scrollableElements;
};

// Positional XPath counting same-name siblings, e.g. /html[1]/body[1]/div[2]
window.generateStandardXPath = function(element) {
    const parts = [];
    let current = element;

    while (current && current.nodeType === Node.ELEMENT_NODE) {
        let index = 1;
        for (let sib = current.previousElementSibling; sib; sib = sib.previousElementSibling) {
            if (sib.nodeName === current.nodeName) index++;
        }
        parts.unshift(`${current.nodeName.toLowerCase()}[${index}]`);
        current = current.parentElement;
    }

    return parts.length ? `/${parts.join("/")}` : "";
};

window.getScrollableElementXpaths = function(topN) {
    return window.getScrollableElements(topN)
        .map((elem) => window.generateStandardXPath(elem))
        .filter((xpath) => xpath !== "");
};
}
"""
