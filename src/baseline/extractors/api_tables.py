"""Curated mappings from script syntax to web platform feature ids."""

# Whole member paths -> feature id
MEMBER_PATHS: dict[str, str] = {
    # Navigator
    "navigator.clipboard": "api.Clipboard",
    "navigator.clipboard.writeText": "api.Clipboard.writeText",
    "navigator.clipboard.readText": "api.Clipboard.readText",
    "navigator.clipboard.write": "api.Clipboard.write",
    "navigator.clipboard.read": "api.Clipboard.read",
    "navigator.geolocation": "api.Geolocation",
    "navigator.geolocation.getCurrentPosition": "api.Geolocation.getCurrentPosition",
    "navigator.geolocation.watchPosition": "api.Geolocation.watchPosition",
    "navigator.serviceWorker": "api.ServiceWorker",
    "navigator.serviceWorker.register": "api.ServiceWorkerContainer.register",
    "navigator.mediaDevices": "api.MediaDevices",
    "navigator.mediaDevices.getUserMedia": "api.MediaDevices.getUserMedia",
    "navigator.mediaDevices.getDisplayMedia": "api.MediaDevices.getDisplayMedia",
    "navigator.share": "api.Navigator.share",
    "navigator.canShare": "api.Navigator.canShare",
    "navigator.vibrate": "api.Navigator.vibrate",
    "navigator.sendBeacon": "api.Navigator.sendBeacon",
    "navigator.storage": "api.StorageManager",
    "navigator.storage.estimate": "api.StorageManager.estimate",
    "navigator.storage.persist": "api.StorageManager.persist",
    "navigator.locks": "api.LockManager",
    "navigator.locks.request": "api.LockManager.request",
    "navigator.wakeLock": "api.WakeLock",
    "navigator.wakeLock.request": "api.WakeLock.request",
    "navigator.permissions.query": "api.Permissions.query",
    "navigator.gpu": "api.GPU",
    "navigator.bluetooth": "api.Bluetooth",
    "navigator.usb": "api.USB",
    "navigator.userAgentData": "api.NavigatorUAData",
    # Document
    "document.querySelector": "api.Document.querySelector",
    "document.querySelectorAll": "api.Document.querySelectorAll",
    "document.getElementById": "api.Document.getElementById",
    "document.createElement": "api.Document.createElement",
    "document.addEventListener": "api.EventTarget.addEventListener",
    "document.startViewTransition": "api.Document.startViewTransition",
    "document.fonts": "api.FontFaceSet",
    "document.fonts.load": "api.FontFaceSet.load",
    "document.exitFullscreen": "api.Document.exitFullscreen",
    "document.exitPictureInPicture": "api.Document.exitPictureInPicture",
    # Window
    "window.fetch": "api.fetch",
    "window.requestAnimationFrame": "api.Window.requestAnimationFrame",
    "window.cancelAnimationFrame": "api.Window.cancelAnimationFrame",
    "window.requestIdleCallback": "api.Window.requestIdleCallback",
    "window.localStorage": "api.Storage",
    "window.sessionStorage": "api.Storage",
    "window.indexedDB": "api.IDBFactory",
    "window.matchMedia": "api.Window.matchMedia",
    "window.showOpenFilePicker": "api.Window.showOpenFilePicker",
    "window.showSaveFilePicker": "api.Window.showSaveFilePicker",
    "window.showDirectoryPicker": "api.Window.showDirectoryPicker",
    "window.structuredClone": "api.structuredClone",
    # Storage
    "localStorage.setItem": "api.Storage",
    "localStorage.getItem": "api.Storage",
    "sessionStorage.setItem": "api.Storage",
    "sessionStorage.getItem": "api.Storage",
    "indexedDB.open": "api.IDBFactory",
    # Element
    "element.closest": "api.Element.closest",
    "element.matches": "api.Element.matches",
    "element.animate": "api.Element.animate",
    "element.scrollIntoView": "api.Element.scrollIntoView",
    "element.addEventListener": "api.EventTarget.addEventListener",
    # Built-in statics
    "Array.from": "api.Array.from",
    "Array.of": "api.Array.of",
    "Array.fromAsync": "api.Array.fromAsync",
    "Array.prototype.at": "api.Array.at",
    "Array.prototype.includes": "api.Array.includes",
    "Array.prototype.find": "api.Array.find",
    "Array.prototype.findIndex": "api.Array.findIndex",
    "String.prototype.includes": "api.String.includes",
    "String.prototype.startsWith": "api.String.startsWith",
    "String.prototype.endsWith": "api.String.endsWith",
    "String.prototype.padStart": "api.String.padStart",
    "String.prototype.padEnd": "api.String.padEnd",
    "Object.assign": "api.Object.assign",
    "Object.entries": "api.Object.entries",
    "Object.fromEntries": "api.Object.fromEntries",
    "Object.groupBy": "api.Object.groupBy",
    "Object.hasOwn": "api.Object.hasOwn",
    "Object.keys": "api.Object.keys",
    "Object.values": "api.Object.values",
    "Map.groupBy": "api.Map.groupBy",
    "Promise.allSettled": "api.Promise.allSettled",
    "Promise.any": "api.Promise.any",
    "Promise.withResolvers": "api.Promise.withResolvers",
    "AbortSignal.timeout": "api.AbortSignal.timeout",
    "AbortSignal.any": "api.AbortSignal.any",
    "URL.canParse": "api.URL.canParse",
    "Intl.Segmenter": "api.Intl.Segmenter",
    "Intl.ListFormat": "api.Intl.ListFormat",
    "crypto.randomUUID": "api.Crypto.randomUUID",
    "crypto.subtle": "api.SubtleCrypto",
    "CSS.supports": "api.CSS.supports",
    "CSS.registerProperty": "api.CSS.registerProperty",
}

# Bare global function calls -> feature id
GLOBAL_FUNCTIONS: dict[str, str] = {
    "fetch": "api.fetch",
    "requestAnimationFrame": "api.Window.requestAnimationFrame",
    "cancelAnimationFrame": "api.Window.cancelAnimationFrame",
    "requestIdleCallback": "api.Window.requestIdleCallback",
    "cancelIdleCallback": "api.Window.cancelIdleCallback",
    "queueMicrotask": "api.queueMicrotask",
    "structuredClone": "api.structuredClone",
    "reportError": "api.reportError",
    "setTimeout": "api.Window.setTimeout",
    "setInterval": "api.Window.setInterval",
    "clearTimeout": "api.Window.clearTimeout",
    "clearInterval": "api.Window.clearInterval",
    "atob": "api.atob",
    "btoa": "api.btoa",
}

# Left-hand names that are always a storage object
STORAGE_OBJECTS: dict[str, str] = {
    "localStorage": "api.Storage",
    "sessionStorage": "api.Storage",
    "indexedDB": "api.IDBFactory",
}

# Methods that only exist on Array among the built-ins
ARRAY_ONLY_METHODS = frozenset({
    "find",
    "findIndex",
    "findLast",
    "findLastIndex",
    "forEach",
    "map",
    "filter",
    "reduce",
    "reduceRight",
    "some",
    "every",
    "flat",
    "flatMap",
    "toSorted",
    "toReversed",
    "toSpliced",
})

# Methods that only exist on String among the built-ins
STRING_ONLY_METHODS = frozenset({
    "startsWith",
    "endsWith",
    "padStart",
    "padEnd",
    "repeat",
    "trim",
    "trimStart",
    "trimEnd",
    "replaceAll",
    "matchAll",
    "normalize",
    "codePointAt",
    "isWellFormed",
    "toWellFormed",
})

# Root objects whose unknown members still map to an interface
PREFIX_ROOTS: dict[str, str] = {
    "navigator": "Navigator",
    "document": "Document",
    "window": "Window",
}
