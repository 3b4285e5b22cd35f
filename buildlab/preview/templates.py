"""Static parts of the live preview document.

The pieces are joined by the renderer rather than formatted, since both JS
braces and ``${}`` template syntax appear throughout.
"""

# Modules whose imports are rewritten to the in-page stubs below
STUB_MODULES = frozenset(
    {
        "react-router-dom",
        "react-router",
        "lucide-react",
        "axios",
        "@reduxjs/toolkit",
        "react-redux",
        "zustand",
    }
)

# Pre-built icons; any other icon name is created on first use
COMMON_ICONS = (
    "Home", "Info", "Mail", "User", "Users", "Video", "MessageSquare", "MessageCircle",
    "Calendar", "ShoppingBag", "ShoppingCart", "DollarSign", "Star", "Phone", "Facebook",
    "Twitter", "Instagram", "Github", "Check", "X", "Trophy", "Sparkles", "ArrowRight",
    "ArrowLeft", "Menu", "Search", "Settings", "LogOut", "Plus", "Minus", "Edit", "Trash",
    "Trash2", "ExternalLink", "ChevronRight", "ChevronLeft", "ChevronDown", "ChevronUp",
    "Clock", "Heart", "Share", "Download", "Upload", "Image", "Film", "Music", "Play",
    "Pause", "Volume", "Loader2", "AlertCircle", "CheckCircle", "XCircle", "Zap", "Bell",
)  # fmt: skip

TITLE_PLACEHOLDER = "__PREVIEW_TITLE__"
STYLES_PLACEHOLDER = "__PREVIEW_STYLES__"
ICONS_PLACEHOLDER = "__COMMON_ICONS__"

DOCUMENT_HEAD = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>__PREVIEW_TITLE__ - Live Preview</title>

  <script src="https://cdn.tailwindcss.com"></script>
  <script>
    tailwind.config = {
      darkMode: 'class',
      theme: { extend: { colors: { zinc: { 950: '#09090b' } } } }
    }
  </script>

  <script src="https://unpkg.com/react@18/umd/react.development.js" crossorigin></script>
  <script src="https://unpkg.com/react-dom@18/umd/react-dom.development.js" crossorigin></script>
  <script src="https://unpkg.com/@babel/standalone/babel.min.js"></script>

  <link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600;700&display=swap" rel="stylesheet">

  <style>
    * { font-family: 'Inter', system-ui, -apple-system, sans-serif; }
    body { background-color: #09090b; color: white; min-height: 100vh; margin: 0; }
    #root { min-height: 100vh; }
    .icon-placeholder { display: inline-flex; width: 20px; height: 20px; align-items: center; justify-content: center; }
__PREVIEW_STYLES__
  </style>
</head>
<body class="bg-zinc-950 text-white dark">
  <div id="root">
    <div class="min-h-screen flex items-center justify-center">
      <div class="text-center">
        <div class="animate-spin w-8 h-8 border-2 border-cyan-500 border-t-transparent rounded-full mx-auto mb-4"></div>
        <p class="text-zinc-400">Loading preview...</p>
      </div>
    </div>
  </div>
"""

ERROR_HANDLER = """
  <script>
    function escapePreviewHtml(value) {
      return String(value).replace(/[&<>"']/g, function (c) {
        return { '&': '&amp;', '<': '&lt;', '>': '&gt;', '"': '&quot;', "'": '&#39;' }[c];
      });
    }

    window.onerror = function (msg, url, lineNo, columnNo, error) {
      console.error('Preview Error:', msg);
      var root = document.getElementById('root');
      if (!root) return true;
      root.innerHTML =
        '<div class="min-h-screen flex items-center justify-center p-8">' +
        '  <div class="max-w-lg text-center">' +
        '    <div class="text-6xl mb-4">&#9888;&#65039;</div>' +
        '    <h2 class="text-2xl font-bold mb-4 text-red-400">Preview Error</h2>' +
        '    <p class="text-zinc-400 mb-4">The generated code couldn\\'t be previewed in the browser.</p>' +
        '    <p class="text-sm text-zinc-500 bg-zinc-900 p-4 rounded-lg text-left font-mono overflow-auto">' +
        escapePreviewHtml(msg) +
        '</p>' +
        '    <p class="text-zinc-500 mt-4">Download the code to run it locally with proper tooling.</p>' +
        '  </div>' +
        '</div>';
      return true;
    };

    window.addEventListener('unhandledrejection', function (event) {
      var reason = event.reason;
      window.onerror(reason && reason.message ? reason.message : String(reason));
    });
  </script>
"""

RUNTIME_OPEN = """
  <script type="text/babel" data-presets="react">
    const {
      useState, useEffect, useRef, useCallback, useMemo, useReducer, useLayoutEffect,
      createContext, useContext, Fragment, forwardRef, memo,
    } = React;

    // react-router-dom
    const BrowserRouter = ({ children }) => children;
    const Routes = ({ children }) => {
      const childArray = React.Children.toArray(children);
      const home = childArray.find((child) => child.props && child.props.path === '/');
      if (home) return home.props.element;
      return childArray[0] && childArray[0].props ? childArray[0].props.element || null : null;
    };
    const Route = ({ element }) => element;
    const Link = ({ to, children, className, ...props }) => (
      <a href={typeof to === 'string' ? to : '#'} className={className} onClick={(e) => e.preventDefault()} {...props}>{children}</a>
    );
    const NavLink = ({ className, ...props }) => (
      <Link className={typeof className === 'function' ? className({ isActive: false }) : className} {...props} />
    );
    const Outlet = () => <div className="outlet-placeholder"></div>;
    const Navigate = () => null;
    const routerModule = {
      BrowserRouter, HashRouter: BrowserRouter, MemoryRouter: BrowserRouter, Router: BrowserRouter,
      Routes, Route, Link, NavLink, Outlet, Navigate,
      useParams: () => ({}),
      useNavigate: () => () => {},
      useLocation: () => ({ pathname: '/', search: '', hash: '' }),
      useSearchParams: () => [new URLSearchParams(), () => {}],
    };

    // lucide-react
    const createIcon = (name) => ({ className, size = 24, ...props }) => (
      <span
        className={'icon-placeholder ' + (className || '')}
        style={{ width: size, height: size }}
        title={name}
        {...props}
      >
        <svg viewBox="0 0 24 24" width={size} height={size} stroke="currentColor" strokeWidth="2" fill="none">
          <circle cx="12" cy="12" r="10" />
        </svg>
      </span>
    );
    const iconCache = {};
    __COMMON_ICONS__.forEach((name) => { iconCache[name] = createIcon(name); });
    const iconModule = new Proxy(iconCache, {
      get: (cache, name) => {
        if (typeof name !== 'string') return undefined;
        if (!(name in cache)) cache[name] = createIcon(name);
        return cache[name];
      },
    });

    // axios
    const axios = {
      get: async (url) => ({ data: {} }),
      post: async (url, data) => ({ data: {} }),
      put: async (url, data) => ({ data: {} }),
      patch: async (url, data) => ({ data: {} }),
      delete: async (url) => ({ data: {} }),
      create: () => axios,
    };

    // @reduxjs/toolkit, react-redux
    const configureStore = () => ({ getState: () => ({}), dispatch: () => {}, subscribe: () => () => {} });
    const createSlice = (config) => ({
      name: config.name,
      reducer: () => config.initialState,
      actions: {},
    });
    const reduxModule = {
      configureStore,
      createSlice,
      createAsyncThunk: () => () => {},
      useSelector: () => ({}),
      useDispatch: () => () => {},
      Provider: ({ children }) => children,
    };

    // zustand
    const create = (initializer) => {
      let state = {};
      const set = (partial) => {
        state = { ...state, ...(typeof partial === 'function' ? partial(state) : partial) };
      };
      state = initializer(set, () => state);
      return (selector) => (selector ? selector(state) : state);
    };

    window.PreviewModules = {
      'react-router-dom': routerModule,
      'react-router': routerModule,
      'lucide-react': iconModule,
      'axios': { ...axios, default: axios },
      '@reduxjs/toolkit': reduxModule,
      'react-redux': reduxModule,
      'zustand': { create, default: create },
    };

    class PreviewErrorBoundary extends React.Component {
      componentDidCatch(error) {
        window.onerror(error && error.message ? error.message : String(error));
      }
      render() {
        return this.props.children;
      }
    }

    window.Pages = window.Pages || {};
    window.Components = window.Components || {};
"""

RUNTIME_CLOSE = """
    const AppComponent = window.__PreviewApp__ ||
      (() => <div className="p-8 text-center">Preview Loading...</div>);

    const container = document.getElementById('root');
    const root = ReactDOM.createRoot(container);
    root.render(<PreviewErrorBoundary><AppComponent /></PreviewErrorBoundary>);
  </script>
</body>
</html>
"""
