"""Centralized message constants for error messages, log templates, and user feedback."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Track Control Errors
    TRACK_FINISHED = "Track '{title}' has already finished"

    # Media Resolution Errors
    NO_MEDIA_FOUND = "No playable media found for {query!r}"
    NOT_A_PLAYLIST = "{url} did not resolve to a playlist"

    # Voice Errors
    GUILD_NOT_FOUND = "Guild {guild_id} not found"
    CHANNEL_NOT_VOICE = "Channel {channel_id} is not a voice channel"
    VOICE_CONNECT_TIMEOUT = "Timed out connecting to channel {channel_id}"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    INVALID_EMBED_COLOUR = "Embed colour components must be in 0..255"

    # Authentication/Security Errors
    DISCORD_TOKEN_REQUIRED = "DISCORD_TOKEN environment variable is required"
    FFMPEG_NOT_FOUND = "ffmpeg was not found on PATH; install it to play audio"
    BOT_NOT_INITIALIZED = "Bot not initialized. Call set_bot() first."
    CONTAINER_NOT_FOUND = "Container not found on bot instance"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Voice Operations
    VOICE_CONNECTED = "Connected to voice channel %s in guild %s"
    VOICE_DISCONNECTED = "Disconnected from voice in guild %s"
    VOICE_MOVED = "Moved to voice channel %s in guild %s"
    VOICE_CONNECTION_TIMEOUT = "Timeout connecting to channel %s"
    VOICE_NO_PERMISSION = "No permission to connect to channel %s"
    VOICE_CLIENT_ERROR = "Client error connecting: %r"
    VOICE_SELF_DEAFEN_FAILED = "Failed to self-deafen in guild %s: %r"
    VOICE_CALL_CREATED = "Created call for guild %s"
    VOICE_CALL_REMOVED = "Removed call for guild %s"
    VOICE_DISCONNECT_FAILED = "Failed to disconnect from voice in guild %s: %s"

    # Playback Operations
    PLAYBACK_STARTED = "Started playing '%s' in guild %s"
    PLAYBACK_STOPPED = "Stopped '%s' in guild %s"
    PLAYBACK_PAUSED = "Paused playback in guild %s"
    PLAYBACK_RESUMED = "Resumed playback in guild %s"
    PLAYBACK_ERROR = "Playback error in guild %s: %s"
    PLAYBACK_FAILED_START = "Failed to start playback of '%s': %s"
    PLAYBACK_LOOPED = "Looping '%s' in guild %s"
    PLAYBACK_PREEMPTED = "Direct track '%s' preempted queued playback in guild %s"

    # Track Operations
    TRACK_ENDED = "Track '%s' ended in guild %s (%s)"
    TRACK_VOLUME_SET = "Volume of '%s' set to %.4f"

    # Queue Operations
    QUEUE_ENQUEUED = "Enqueued '%s' at position %s in guild %s"
    QUEUE_SKIPPED = "Skipped '%s' in guild %s"
    QUEUE_CLEARED = "Cleared %s tracks from queue in guild %s"
    QUEUE_PREBUFFER_ARMED = "Queue paused for %ss prebuffer in guild %s"

    # Events
    EVENT_HANDLER_ERROR = "Error in %s handler %s"
    EVENT_HANDLER_CANCELLED = "Handler %s cancelled itself for %s"

    # Reactors
    REACTOR_RESUMED = "Prebuffer window elapsed, resumed queue in guild %s"
    REACTOR_NO_CALL = "Reactor %s fired for guild %s without an active call"
    REACTOR_FADE_TICK = "Fade tick for '%s': volume %.4f"

    # Resolution/Search
    YTDLP_NO_STREAM_URL = "No stream URL found for %s"
    YTDLP_FAILED_EXTRACT_INFO = "Failed to extract info from %s"
    YTDLP_FAILED_SEARCH = "Failed to search for %r"
    YTDLP_FAILED_EXTRACT_PLAYLIST = "Failed to extract playlist from %s"
    YTDLP_PLAYLIST_EXPANDED = "Expanded playlist %s into %d items"
    SOURCE_FAILED = "Err starting source for %r: %s"
    CACHE_HIT_URL = "Cache hit for %s"
    CACHE_EXPIRED_CLEANED = "Cleaned %d expired cache entries"

    # Messaging
    MESSAGE_SEND_FAILED = "Error sending message to channel %s: %r"
    MESSAGE_CHANNEL_NOT_FOUND = "Channel %s not found, dropping message"

    # Commands
    COMMAND_INVOKED = "Command %s invoked by %s in guild %s"
    COMMAND_ERROR = "Unhandled error in command %s"
    COMMAND_NOT_FOUND = "Ignoring unknown command: %s"
    TRACK_CONTROL_FAILED = "Track control failed: %s"

    # Application Lifecycle
    BOT_STARTING = "Starting Discord Jukebox in {environment} mode"
    BOT_FFMPEG_FOUND = "Using ffmpeg at %s"
    BOT_VOICE_DEBUG = "Debug mode: discord voice gateway logging enabled"
    BOT_SETUP = "Setting up bot..."
    BOT_SETUP_COMPLETE = "Bot setup complete"
    BOT_STARTING_RUN = "Starting bot..."
    BOT_STOPPED = "Bot stopped successfully"
    BOT_KEYBOARD_INTERRUPT = "Received keyboard interrupt, shutting down..."
    BOT_FATAL_ERROR = "Fatal error: %s"
    BOT_SHUTTING_DOWN = "Shutting down bot..."
    BOT_CONTAINER_SHUTDOWN = "Container shutdown complete"
    BOT_CONTAINER_SHUTDOWN_ERROR = "Error during container shutdown: %s"
    BOT_SHUTDOWN_COMPLETE = "Bot shutdown complete"
    BOT_SHUTDOWN_TIMEOUT = "Graceful shutdown exceeded %ss"
    BOT_READY = "%s is connected! (%s)"
    BOT_CONNECTED_GUILDS = "Connected to %s guilds"

    # Bot Cog Management
    BOT_COG_LOADED = "Loaded cog: %s"
    BOT_COG_LOAD_FAILED = "Failed to load cog %s: %s"
    BOT_CONTAINER_INITIALIZED = "Container initialized"


class DiscordUIMessages:
    """User-facing Discord messages and responses.

    These strings are shown directly to users in the originating text channel.
    """

    # Voice Channel
    JOINED = "Joined {channel_mention}"
    LEFT = "Left voice channel"
    LEAVE_FAILED = "Failed: {error}"
    JOIN_FAILED = "Error joining the channel"
    DEAFEN_FAILED = "There was an error while trying to deafen, if this keeps happening please contact the developer"

    # Preconditions
    STATE_NOT_IN_VOICE = "Not in a voice channel"
    STATE_CALLER_NOT_IN_VOICE = "You are not in a vc."
    STATE_NO_CALL = "Not in a voice channel to play in"
    STATE_SERVER_ONLY = "This command can only be used in a server."
    STATE_NOTHING_PLAYING = ":x: there is no song playing right now"
    STATE_NO_SONG_FOR_LOOP = "No song is playing, please play a song first"

    # Query validation
    ERROR_QUERY_REQUIRED = "Must provide a URL or a search query"
    ERROR_URL_REQUIRED = "Must provide a URL to a video or audio"
    ERROR_URL_INVALID = "Must provide a valid URL"
    ERROR_PLAYLIST_URL_REQUIRED = "Must provide a playlist URL"

    # Media resolution
    ERROR_SOURCING = "Error sourcing ffmpeg (see console)"
    PLAYLIST_POLLING = "Polling..."
    PLAYLIST_POLLED = "Polled!"
    PLAYLIST_EMPTY = "This playlist has no videos!"
    PLAYLIST_NOT_A_PLAYLIST = "That link did not resolve to a playlist."

    # Queue
    PREBUFFERING = "Prebuffering..."
    ADDED_TO_QUEUE = "Added song to queue, position `{position}`"
    SKIPPED = "Song skipped: {remaining} in queue."
    QUEUE_CLEARED = "Queue cleared."
    TRACKS_ENDED = "Tracks ended: {count}."
    NO_TITLE = "<no title>"

    # Fade
    PLAYING_SONG = "Playing song"
    VOLUME_REDUCED = "Volume reduced."
    STOPPING_SONG = "Stopping song..."
    SONG_FADED_OUT = "Song faded out completely!"

    # Loop
    LOOP_ENABLED = "Enabled infinite loop for the current song!"
    LOOP_DISABLED = "Disabled infinite loop for the current song!"
    LOOP_ALREADY_FINISHED = "The song is already finished, please queue another one"
    LOOP_INTERNAL_ERROR = "Something went wrong on our side, please report this to the developer ({code})"

    # Now playing
    NOW_PLAYING = "Now playing (in {channel_mention}): "
    NOW_PLAYING_FINISHED = "The song is finished and there are no more songs"
    NOW_PLAYING_INTERNAL_ERROR = "This error shouldn't occur, please contact the developer ({code})"
    FOOTER_DURATION = "Duration: {duration}"

    # Misc
    PONG = "Pong!"
