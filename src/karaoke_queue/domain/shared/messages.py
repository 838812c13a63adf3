"""Centralized message constants for error messages, log templates, and chat replies."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    EMPTY_VIDEO_ID = "Video ID cannot be empty"
    TIMEZONE_REQUIRED_UTC_DATETIME = "UtcDateTime requires a timezone-aware datetime"
    ALREADY_PLAYED = "Queue item has already been played"

    INVALID_DATABASE_URL = "Database URL must start with sqlite://"
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    ALPHANUMERIC_CODE_TOO_SHORT = "Alphanumeric session codes need at least 6 characters"

    DISCORD_TOKEN_REQUIRED = "DISCORD__TOKEN environment variable is required"
    CONTAINER_NOT_FOUND = "Container not found on bot instance"

    YOUTUBE_API_KEY_NOT_SET = "YOUTUBE__API_KEY not set"
    NO_CONNECTED_CAST_DEVICES = "No connected cast devices"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Database Lifecycle
    DATABASE_INITIALIZED = "Database initialized at %s"
    DATABASE_CLOSED = "Database manager closed"

    # Snapshot persistence
    SNAPSHOT_SAVED = "Saved snapshot: %d sessions, %d memberships"
    SNAPSHOT_LOADED = "Loaded snapshot: %d sessions, %d memberships"
    SNAPSHOT_SAVE_FAILED = "Failed to save session snapshot: %r"
    SNAPSHOT_LOAD_FAILED = "Failed to load session snapshot, starting empty: %r"

    # Session lifecycle
    SESSION_CREATED = "Created session %s for %s"
    SESSION_JOINED = "Caller %s joined session %s"
    SESSION_LEFT = "Caller %s left session %s"
    SESSION_DELETED = "Session %s deleted (no members left)"
    SESSION_DETACHED = "Caller %s detached from previous session %s"
    SESSION_JOIN_UNKNOWN = "Caller %s tried to join unknown session %s"
    SESSION_CODE_COLLISION = "Session code %s already in use, regenerating"

    # Queue operations
    QUEUE_ENQUEUED = "Queued video %s in session %s (position %d)"
    QUEUE_DUPLICATE = "Rejected duplicate video %s in session %s"
    QUEUE_ADVANCED = "Advanced session %s to video %s"
    QUEUE_SESSION_GONE = "Session of caller %s changed while resolving %s"
    PLAYBACK_STOPPED = "Playback stopped in session %s"
    DEVICE_BOUND = "Bound cast device %s to session %s"

    # Resolver
    RESOLVER_TITLE_FALLBACK = "Failed to fetch video title for %s: %s"
    RESOLVER_RESOLVED = "Resolved %s -> %s"

    # Cast
    CAST_DISCOVERED = "Discovered %d cast device(s)"
    CAST_CONNECTING = "Connecting to cast device %s"
    CAST_PLAYING = "Casting video %s to %s"
    CAST_STOPPING = "Stopping casting on %s"
    CAST_CONNECTION_DROPPED = "Dropped cached connection to %s: %r"
    CAST_FAILED = "Cast to %s failed after advancing session %s: %s"
    CAST_DISCONNECT_FAILED = "Failed to disconnect from %s: %r"

    # Bot Lifecycle
    BOT_STARTING = "Starting karaoke queue bot (environment=%s)"
    BOT_STARTING_RUN = "Connecting to Discord"
    BOT_STOPPED = "Bot stopped"
    BOT_KEYBOARD_INTERRUPT = "Bot interrupted by user"
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SETUP = "Running bot setup hook"
    BOT_CONTAINER_INITIALIZED = "Container initialized"
    BOT_CONTAINER_INIT_FAILED = "Container initialization failed: %s"
    BOT_COG_LOADED = "Loaded cog %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_COGS_LOADED_SUMMARY = "Cogs loaded: %d ok, %d failed"
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_READY = "Logged in as %s (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %d guild(s)"
    BOT_SLASH_COMMAND_ERROR = "Error in slash command %s: %r"
    BOT_ERROR_MESSAGE_SEND_FAILED = "Failed to send error message to user"
    BOT_SYNCED_GUILD = "Synced %d command(s) to guild %s"
    BOT_SYNC_GUILD_FAILED = "Failed to sync commands to guild %s: %r"
    BOT_SYNCED_GLOBAL = "Synced %d global command(s)"
    BOT_SYNC_GLOBAL_FAILED = "Failed to sync global commands: %r"
    BOT_SYNC_ON_STARTUP_FAILED = "Command sync on startup failed: %r"
    BOT_SHUTTING_DOWN = "Shutting down bot"
    BOT_CONTAINER_SHUTDOWN = "Container shut down"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error shutting down container: %r"
    BOT_SHUTDOWN_COMPLETE = "Shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown timed out after %ss"


class ChatMessages:
    """User-facing chat replies."""

    HELP = (
        "**Karaoke queue commands**\n"
        "/start_session - start a new karaoke session\n"
        "/join <code> - join an existing session\n"
        "/add <url> [note] - add a YouTube link to the queue\n"
        "/queue - show the upcoming songs\n"
        "/next - play the next song (session owner only)\n"
        "/current - show what is playing\n"
        "/history - show songs already played\n"
        "/info - show session details\n"
        "/leave - leave your session\n"
        "/devices, /device <name>, /stop - control the cast device\n"
        "You can also just paste a YouTube link into the chat."
    )

    SESSION_CREATED = (
        "Created new karaoke session with code: **{code}**\n"
        "Share this code with friends to let them join!"
    )
    SESSION_JOINED = "You've joined session: **{code}**"
    INVALID_SESSION_CODE = "Invalid session code. Please check and try again."
    SESSION_LEFT = "You've left the session."
    NOT_IN_SESSION = (
        "You're not in a session. Join one with /join <code> "
        "or start your own with /start_session"
    )
    NOT_OWNER = "Only the session owner can do that."

    ADDED_TO_QUEUE = "Added to queue: **{title}**! Type /queue to see the current lineup."
    ALREADY_IN_QUEUE = "This video is already in the queue."
    INVALID_URL = "Please provide a valid YouTube URL."
    RESOLVER_TIMEOUT = "Looking up that video took too long. Please try again."
    ADD_FAILED = "There was an error adding your video to the queue."

    QUEUE_EMPTY = "The queue is empty. Add videos with /add <youtube_url>"
    QUEUE_HEADER = "**Current queue:**"
    QUEUE_LINE = "{index}. {title} (added by {added_by}){note}"
    HISTORY_EMPTY = "Nothing has been played yet."
    HISTORY_HEADER = "**Already played:**"
    NOTE_SUFFIX = " - Note: {note}"

    NOW_PLAYING = "Now playing: **{title}**\n{url}"
    NOW_PLAYING_ON_DEVICE = "Now playing: **{title}** on {device}\n{url}"
    NOTHING_PLAYING = "Nothing is playing right now."
    NO_MORE_SONGS = "No more songs in the queue."
    CAST_FAILED = "Queue advanced, but casting failed: {error}"

    DEVICES_HEADER = "**Cast devices:**"
    NO_DEVICES = "No cast devices found on the network."
    DEVICE_BOUND = "Cast device set to **{device}**."
    PLAYBACK_STOPPED = "Playback stopped."
    CAST_ERROR = "Cast device error: {error}"
    CAST_DISABLED = "Casting is disabled."

    SESSION_INFO = "Session ID: {code}\nDuration: {hours}h {minutes}m\nUsers in session: {count}"
    SESSION_INFO_MEMBERS_HEADER = "\n\nUsers in session:"
    SESSION_INFO_MEMBER_LINE = "\n- {name}"
    ANONYMOUS = "Anonymous"
