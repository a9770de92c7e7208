"""
TicTacToe UI
A graphical interface for the game using Tkinter.

Shows:
- The board with marks, winning cells and strike line
- Game status and whose turn it is
- Score (X wins, O wins, draws)
- Opponent mode and side selection
"""

import logging
import tkinter as tk
from tkinter import ttk
from PIL import Image, ImageTk
from typing import Optional

# Game imports
from game.board import Player
from game.config import OpponentMode, SessionSettings
from game.scheduler import TkScheduler
from game.session import GameSession, SessionSnapshot

# Render imports
from render.config import RenderConfig
from render.board_renderer import BoardRenderer

logger = logging.getLogger(__name__)

PILL_COLORS = {
    "X": ('#00d4ff', 'black'),
    "O": ('#ff6b6b', 'black'),
    "Draw": ('#6b7280', 'white'),
}


class TicTacToeUI:
    """
    Main UI class for the TicTacToe game.

    The window only draws snapshots and forwards clicks; all rules and
    timing live in GameSession.
    """

    def __init__(
        self,
        settings: Optional[SessionSettings] = None,
        root: Optional[tk.Tk] = None
    ):
        """
        Initialize the UI.

        Args:
            settings: Initial mode, human side and computer delay.
            root: Existing Tk root to build into (default: create one).
        """
        self.root = root or tk.Tk()
        self.renderer = BoardRenderer(RenderConfig())
        self.photo: Optional[ImageTk.PhotoImage] = None

        self._create_ui()

        self.session = GameSession(
            settings=settings or SessionSettings(),
            scheduler=TkScheduler(self.root)
        )
        self.mode_var.set(self.session.settings.mode.value)
        self.side_var.set(self.session.settings.human_side.value)

        self.session.add_listener(self._on_session_change)
        self._on_session_change(self.session.snapshot())

    def _create_ui(self):
        """Create the Tkinter UI."""
        self.root.title("TicTacToe")
        self.root.configure(bg='#1a1a2e')
        self.root.resizable(False, False)

        main_frame = ttk.Frame(self.root)
        main_frame.pack(fill=tk.BOTH, expand=True, padx=10, pady=10)

        # Configure style
        style = ttk.Style()
        style.theme_use('clam')
        style.configure('TFrame', background='#1a1a2e')
        style.configure('TLabel', background='#1a1a2e', foreground='white', font=('Segoe UI', 11))
        style.configure('Title.TLabel', font=('Segoe UI', 16, 'bold'), foreground='#00d4ff')
        style.configure('Status.TLabel', font=('Segoe UI', 12), foreground='#ffd700')
        style.configure('Score.TLabel', font=('Segoe UI', 14, 'bold'))
        style.configure('TRadiobutton', background='#1a1a2e', foreground='white')

        # Left panel - Board
        left_frame = ttk.Frame(main_frame)
        left_frame.pack(side=tk.LEFT, fill=tk.BOTH, padx=(0, 10))

        size = self.renderer.size
        self.board_canvas = tk.Canvas(
            left_frame, width=size, height=size, bg='#1a1a2e',
            highlightthickness=2, highlightbackground='#00d4ff'
        )
        self.board_canvas.pack()
        self.board_canvas.bind("<Button-1>", self._on_canvas_click)

        # Right panel
        right_frame = ttk.Frame(main_frame, width=260)
        right_frame.pack(side=tk.RIGHT, fill=tk.Y, padx=(10, 0))
        right_frame.pack_propagate(False)

        # Status section
        ttk.Label(right_frame, text="Game Status", style='Title.TLabel').pack()

        self.status_label = ttk.Label(right_frame, text="", style='Status.TLabel')
        self.status_label.pack(pady=5)

        turn_frame = ttk.Frame(right_frame)
        turn_frame.pack(pady=5)
        ttk.Label(turn_frame, text="Turn: ").pack(side=tk.LEFT)
        self.turn_pill = tk.Label(
            turn_frame, text="X", font=('Segoe UI', 11, 'bold'),
            width=6, relief='flat'
        )
        self.turn_pill.pack(side=tk.LEFT)

        # Score section
        ttk.Separator(right_frame, orient='horizontal').pack(fill=tk.X, pady=15)
        ttk.Label(right_frame, text="Score", style='Title.TLabel').pack()

        score_frame = ttk.Frame(right_frame)
        score_frame.pack(pady=5)
        self.score_labels = {}
        for key, title in (("X", "X"), ("O", "O"), ("D", "Draws")):
            column = ttk.Frame(score_frame)
            column.pack(side=tk.LEFT, padx=10)
            ttk.Label(column, text=title).pack()
            label = ttk.Label(column, text="0", style='Score.TLabel')
            label.pack()
            self.score_labels[key] = label

        # Mode section
        ttk.Separator(right_frame, orient='horizontal').pack(fill=tk.X, pady=15)
        ttk.Label(right_frame, text="Opponent", style='Title.TLabel').pack()

        self.mode_var = tk.StringVar(value=OpponentMode.COMPUTER.value)
        self.mode_frame = ttk.Frame(right_frame)
        self.mode_frame.pack(pady=5)
        for text, mode in (("Computer", OpponentMode.COMPUTER), ("Two players", OpponentMode.HUMAN)):
            ttk.Radiobutton(
                self.mode_frame, text=text, value=mode.value,
                variable=self.mode_var, command=self._on_mode_change
            ).pack(side=tk.LEFT, padx=5)

        # Only meaningful against the computer
        self.side_frame = ttk.Frame(right_frame)
        ttk.Label(self.side_frame, text="You play:").pack(side=tk.LEFT)
        self.side_var = tk.StringVar(value=Player.X.value)
        for player in (Player.X, Player.O):
            ttk.Radiobutton(
                self.side_frame, text=player.value, value=player.value,
                variable=self.side_var, command=self._on_side_change
            ).pack(side=tk.LEFT, padx=5)
        self.side_frame.pack(pady=5)

        # Control buttons
        ttk.Separator(right_frame, orient='horizontal').pack(fill=tk.X, pady=15)

        control_frame = ttk.Frame(right_frame)
        control_frame.pack(pady=10)

        tk.Button(
            control_frame,
            text="New Round",
            font=('Segoe UI', 11, 'bold'),
            bg='#10b981',
            fg='white',
            width=10,
            command=self._new_round
        ).pack(side=tk.LEFT, padx=5)

        tk.Button(
            control_frame,
            text="Reset All",
            font=('Segoe UI', 11, 'bold'),
            bg='#6366f1',
            fg='white',
            width=10,
            command=self._reset_all
        ).pack(side=tk.LEFT, padx=5)

        tk.Button(
            right_frame,
            text="Quit",
            font=('Segoe UI', 10),
            bg='#ef4444',
            fg='white',
            width=22,
            command=self._quit
        ).pack(pady=10)

        # Keys 1-9 pick a cell, n = new round, r = reset all
        self.root.bind("<Key>", self._on_key)
        self.root.protocol("WM_DELETE_WINDOW", self._quit)

    # ==================== INPUT ====================

    def _on_canvas_click(self, event):
        index = self.renderer.cell_at(event.x, event.y)
        if index is not None:
            self.session.request_move(index)

    def _on_key(self, event):
        char = event.char
        if char and char in "123456789":
            self.session.request_move(int(char) - 1)
        elif char in ("n", "N"):
            self._new_round()
        elif char in ("r", "R"):
            self._reset_all()

    def _on_mode_change(self):
        self.session.set_opponent_mode(self.mode_var.get())

    def _on_side_change(self):
        self.session.set_human_side(self.side_var.get())

    def _new_round(self):
        self.session.request_new_round()

    def _reset_all(self):
        self.session.request_full_reset()

    # ==================== DISPLAY ====================

    def _on_session_change(self, snapshot: SessionSnapshot):
        """Redraw everything from a snapshot."""
        self._update_board_canvas(snapshot)
        self._update_game_info(snapshot)

    def _update_board_canvas(self, snapshot: SessionSnapshot):
        frame = self.renderer.to_rgb(self.renderer.draw(snapshot))

        image = Image.fromarray(frame)
        photo = ImageTk.PhotoImage(image, master=self.root)

        self.board_canvas.delete("all")
        self.board_canvas.create_image(0, 0, anchor=tk.NW, image=photo)
        self.photo = photo  # Keep reference

        cursor = "hand2" if snapshot.accepting_input else "arrow"
        self.board_canvas.configure(cursor=cursor)

    def _update_game_info(self, snapshot: SessionSnapshot):
        """Update status, turn pill, score and side chooser."""
        status = snapshot.status_text
        if snapshot.computer_pending:
            status = "Computer is thinking..."
        self.status_label.configure(text=status)

        if snapshot.outcome.is_draw:
            pill = "Draw"
        elif snapshot.round_over:
            pill = snapshot.outcome.winner.value
        else:
            pill = snapshot.turn.value
        bg, fg = PILL_COLORS[pill]
        self.turn_pill.configure(text=pill, bg=bg, fg=fg)

        for key, value in snapshot.score.as_dict().items():
            self.score_labels[key].configure(text=str(value))

        if snapshot.mode == OpponentMode.COMPUTER:
            self.side_frame.pack(pady=5, after=self.mode_frame)
        else:
            self.side_frame.pack_forget()

    def _quit(self):
        """Quit the application."""
        logger.info("Quitting")
        self.session.close()
        self.root.quit()
        self.root.destroy()

    def run(self):
        """Run the UI main loop."""
        self.root.mainloop()
