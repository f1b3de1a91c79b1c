"""StreaX core library: streak & goal-accounting engine plus its collaborators.

Public API re-exports for convenient imports:
    from streax import get_today_log, record_session, use_streak_saver, ...
"""

# Config & clock
from streax.config import (
    data_root,
    settings_path,
    hooks_config_path,
    store_dir,
    Settings,
    load_settings,
    today_str,
    now_local,
    configure_logging,
)

# Errors
from streax.errors import (
    StreaxError,
    ValidationError,
    MalformedDataError,
    IncompatibleBackupError,
    NoDataError,
    TimerStateError,
)

# Models
from streax.models import (
    SCHEMA_VERSION,
    UserProfile,
    SessionPreset,
    PomodoroSession,
    DailyLog,
    StreakData,
    Notification,
    AppData,
    BackupData,
)

# Engine
from streax.rewards import (
    REWARD_TIERS,
    RewardTier,
    calculate_free_time_rewards,
    get_goal_progress,
    next_reward_tier,
)
from streax.goals import (
    DayPlan,
    calculate_daily_goal,
    calculate_backlog,
    is_goal_met,
    goal_deficit,
    plan_day,
)
from streax.streak import (
    BACKLOG_SAVER_CAP,
    Milestone,
    MilestoneAward,
    credit_backlog_savers,
    update_streak_status,
    get_next_milestone,
)
from streax.daylog import (
    get_or_create_log,
    get_today_log,
    record_session,
    save_notes,
)
from streax.savers import (
    SaverResult,
    use_streak_saver,
    use_backlog_savers,
    redeem_backlog_for_deficit,
)

# Notifications
from streax.notifications import (
    add_notification,
    mark_notification_read,
    mark_all_read,
    get_unread_count,
    get_notifications,
)
from streax.hooks import run_hooks, deliver

# Persistence
from streax.storage import (
    STORAGE_KEY,
    TIMER_STATE_KEY,
    JsonStore,
    create_profile,
    default_app_data,
    load_app_data,
    save_app_data,
    has_completed_onboarding,
    clear_all_data,
    export_backup,
    backup_filename,
    restore_backup,
)

# Timer
from streax.timer import (
    TimerPhase,
    TimerState,
    PomodoroTimer,
    remaining_seconds,
    save_timer_state,
    load_timer_state,
)

# Views
from streax.insights import today_summary, timeframe_stats, recent_days
