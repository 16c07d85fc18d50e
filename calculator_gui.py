#!/usr/bin/env python3
"""
Keypad Calculator (Tkinter)

- Light/Dark • keypad + keyboard • history trail • session history • scientific panel
- Arithmetic lives in calculator.CalculatorEngine; this module draws and routes input
"""

from __future__ import annotations

import logging
import tkinter as tk
from tkinter import messagebox
from tkinter import font as tkfont
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from calculator import CalculatorEngine, Settings, ViewSettings, setup_logging

log = logging.getLogger("calculator.gui")

# ============================ Small UI helpers ==============================

def _hex_to_rgb(h: str) -> tuple[int,int,int]:
    h = h.lstrip("#"); return tuple(int(h[i:i+2],16) for i in (0,2,4))
def _rgb_to_hex(r:int,g:int,b:int) -> str: return f"#{r:02x}{g:02x}{b:02x}"
def _mix(c1:str,c2:str,t:float)->str:
    r1,g1,b1=_hex_to_rgb(c1); r2,g2,b2=_hex_to_rgb(c2)
    r=round(r1+(r2-r1)*t); g=round(g1+(g2-g1)*t); b=round(b1+(b2-b1)*t)
    return _rgb_to_hex(r,g,b)

class Tooltip:
    def __init__(self, widget: tk.Widget, text: str) -> None:
        self.widget=widget; self.text=text; self.tip: Optional[tk.Toplevel]=None
        if text: widget.bind("<Enter>", self._show, add="+"); widget.bind("<Leave>", self._hide, add="+")
    def _show(self,_e=None)->None:
        if self.tip or not self.text: return
        try:
            self.tip=tk.Toplevel(self.widget.winfo_toplevel()); self.tip.wm_overrideredirect(True)
            x=self.widget.winfo_rootx()+self.widget.winfo_width()//2
            y=self.widget.winfo_rooty()+self.widget.winfo_height()+8
            self.tip.wm_geometry(f"+{x}+{y}")
            tk.Label(self.tip,text=self.text,bg="#111",fg="#fff",
                     padx=6,pady=3,relief="solid",bd=0,font=("Segoe UI",9)).pack()
        except tk.TclError:
            log.debug("tooltip not shown for %r", self.text); self.tip=None
    def _hide(self,_e=None)->None:
        if self.tip: self.tip.destroy(); self.tip=None

# =============================== Pretty UI ==================================

@dataclass
class Palette:
    name:str; bg:str; panel:str; display_bg:str; fg:str; subtle:str; btn_bg:str; btn_active:str; op_bg:str; accent:str; border:str

LIGHT = Palette("light","#F6F7FB","#FFFFFF","#FFFFFF","#1F2937","#6B7280","#EEF1F7","#E5E7EB","#E0E7FF","#4F46E5","#E5E7EB")
DARK  = Palette("dark" ,"#0F172A","#111827","#0B1220","#E5E7EB","#9CA3AF","#1F2937","#334155","#312E81","#60A5FA","#1F2937")

# Tk keysyms whose event.char is not the key name the engine expects
_KEYSYM_KEYS: Dict[str, str] = {"Return": "Enter", "KP_Enter": "Enter", "Escape": "Escape"}

class CalculatorApp(tk.Tk):
    # (label, function name)
    SCI_FUNCS = [("sin","sin"),("cos","cos"),("tan","tan"),("ln","ln"),("log","log"),("√","sqrt"),
                 ("x²","square"),("x³","cube"),("x!","factorial"),("π","pi"),("e","e")]

    def __init__(self, settings: Optional[Settings] = None, view: Optional[ViewSettings] = None) -> None:
        super().__init__()
        self.title("Calculator"); self.minsize(560, 520)
        self.engine = CalculatorEngine(settings or Settings.from_env())
        self.view = view or ViewSettings()

        self._init_fonts(); self._build_ui(); self._apply_palette(); self._refresh()
        self.bind("<Key>", self._on_key)
        log.info("calculator window ready (theme=%s, angle=%s)", self.view.theme, self.engine.settings.angle_mode)

    @property
    def palette(self) -> Palette: return DARK if self.view.theme == "dark" else LIGHT

    # Fonts
    def _init_fonts(self)->None:
        def choose(*names:str)->str:
            avail=set(tkfont.families(self))
            for n in names:
                if n in avail: return n
            return "Segoe UI"
        self.fonts={"title":tkfont.Font(self,family=choose("Segoe UI Variable","Segoe UI Semibold"), size=16),
                    "ui":tkfont.Font(self,family=choose("Segoe UI","Arial"), size=11),
                    "ui_bold":tkfont.Font(self,family=choose("Segoe UI Semibold","Segoe UI","Arial"), size=11, weight="bold"),
                    "mono":tkfont.Font(self,family=choose("Consolas","Courier New"), size=26),
                    "trail":tkfont.Font(self,family=choose("Consolas","Courier New"), size=11)}

    # UI
    def _build_ui(self)->None:
        self.root_frame=tk.Frame(self,bd=0); self.root_frame.pack(fill="both",expand=True,padx=12,pady=12)

        self.topbar=tk.Frame(self.root_frame); self.topbar.pack(fill="x")
        self.title_label=tk.Label(self.topbar,text="Calculator",font=self.fonts["title"],anchor="w"); self.title_label.pack(side="left")
        self.theme_btn=tk.Button(self.topbar,text=self._theme_icon(),width=3,relief="flat",command=self.toggle_theme); self.theme_btn.pack(side="right")
        self.sci_btn=tk.Button(self.topbar,text="sci",width=4,relief="flat",command=self.toggle_scientific); self.sci_btn.pack(side="right",padx=(0,6))
        Tooltip(self.theme_btn,"Light / dark theme"); Tooltip(self.sci_btn,"Show scientific functions")

        self.display_panel=tk.Frame(self.root_frame,bd=1); self.display_panel.pack(fill="x",pady=(10,8))
        self.trail_var=tk.StringVar(); self.display_var=tk.StringVar()
        self.trail_label=tk.Label(self.display_panel,textvariable=self.trail_var,anchor="e",font=self.fonts["trail"])
        self.trail_label.pack(fill="x",padx=12,pady=(10,0))
        self.display_label=tk.Label(self.display_panel,textvariable=self.display_var,anchor="e",font=self.fonts["mono"])
        self.display_label.pack(fill="x",padx=12,pady=(0,10))

        self.area=tk.Frame(self.root_frame); self.area.pack(fill="both",expand=True)
        self.left_box=tk.Frame(self.area); self.left_box.pack(side="left",fill="both",expand=True)
        self.right_box=tk.Frame(self.area,width=200); self.right_box.pack(side="right",fill="y",padx=(10,0))

        self.sci_frame=tk.Frame(self.left_box)
        self.grid_frame=tk.Frame(self.left_box); self.grid_frame.grid(row=1,column=0,sticky="nsew")
        self.left_box.grid_columnconfigure(0,weight=1); self.left_box.grid_rowconfigure(1,weight=1)
        for c in range(4):
            self.grid_frame.grid_columnconfigure(c, weight=1); self.sci_frame.grid_columnconfigure(c, weight=1)
        for r in range(5): self.grid_frame.grid_rowconfigure(r, weight=1)

        self.buttons: List[tk.Button] = []
        self.op_buttons: Dict[str, tk.Button] = {}

        def add_btn(parent:tk.Frame,row:int,col:int,text:str,action:Callable[[],object],
                    accent:bool=False,colspan:int=1,tip:str="",operator:Optional[str]=None)->None:
            b=tk.Button(parent,text=text,relief="flat",bd=0,
                        font=self.fonts["ui_bold"] if accent else self.fonts["ui"], command=lambda: self._run(action))
            b.grid(row=row,column=col,columnspan=colspan,sticky="nsew",padx=4,pady=4,ipady=8)
            b.bind("<Enter>",lambda _e:b.configure(bg=self._hover_bg(b)),add="+")
            b.bind("<Leave>",lambda _e:b.configure(bg=self._button_bg(b)),add="+")
            if tip: Tooltip(b, tip)
            if accent: b._accent=True  # type: ignore[attr-defined]
            if operator: self.op_buttons[operator]=b
            self.buttons.append(b)

        e=self.engine
        def digit(d:str)->Callable[[],object]: return lambda: e.enter_digit(d)
        def op(sym:str)->Callable[[],object]: return lambda: e.apply_operator(sym)
        def fn(name:str)->Callable[[],object]: return lambda: e.apply_scientific_function(name)

        g=self.grid_frame
        # Row 0
        add_btn(g,0,0,"C",e.clear,colspan=2,tip="Clear (Esc)")
        add_btn(g,0,2,"( )",e.enter_parenthesis,tip="Parenthesis (text only)")
        add_btn(g,0,3,"÷",op("÷"),operator="÷")
        # Rows 1-3
        for r,(a,b,c,sym) in enumerate((("7","8","9","×"),("4","5","6","-"),("1","2","3","+")),start=1):
            add_btn(g,r,0,a,digit(a)); add_btn(g,r,1,b,digit(b)); add_btn(g,r,2,c,digit(c))
            add_btn(g,r,3,"−" if sym=="-" else sym,op(sym),operator=sym)
        # Row 4
        add_btn(g,4,0,"0",digit("0")); add_btn(g,4,1,".",e.enter_decimal_point)
        add_btn(g,4,2,"%",op("%"),operator="%",tip="a % b = a × b / 100")
        add_btn(g,4,3,"=",op("="),accent=True,tip="Evaluate (Enter)")

        # Scientific panel
        for i,(label,name) in enumerate(self.SCI_FUNCS):
            add_btn(self.sci_frame,i//4,i%4,label,fn(name))
        add_btn(self.sci_frame,2,3,"xʸ",op("^"),operator="^",tip="Power")
        add_btn(self.sci_frame,3,3,"mod",op("mod"),operator="mod",tip="Remainder")
        if self.view.scientific_panel: self.sci_frame.grid(row=0,column=0,sticky="nsew",pady=(0,6))

        # History
        self.hist_header=tk.Label(self.right_box,text="History",font=self.fonts["ui_bold"]); self.hist_header.pack(anchor="w",pady=(0,4))
        self.hist_container=tk.Frame(self.right_box,bd=1); self.hist_container.pack(fill="y",expand=True)
        self.history_list=tk.Listbox(self.hist_container,height=16,width=24,activestyle="none",selectmode="browse",
                                     bd=0,highlightthickness=0,font=self.fonts["trail"])
        self.history_list.pack(side="left",fill="y")
        self.hist_scroll=tk.Scrollbar(self.hist_container,orient="vertical",command=self.history_list.yview)
        self.hist_scroll.pack(side="right",fill="y")
        self.history_list.config(yscrollcommand=self.hist_scroll.set)

        # Menus
        menubar=tk.Menu(self); settings_menu=tk.Menu(menubar,tearoff=0)
        mode_menu=tk.Menu(settings_menu,tearoff=0)
        self.mode_var=tk.StringVar(self,value=self.engine.settings.angle_mode)
        mode_menu.add_radiobutton(label="Degrees",variable=self.mode_var,value="deg",command=lambda:self.set_mode("deg"))
        mode_menu.add_radiobutton(label="Radians",variable=self.mode_var,value="rad",command=lambda:self.set_mode("rad"))
        settings_menu.add_cascade(label="Angle Mode",menu=mode_menu)
        settings_menu.add_separator()
        settings_menu.add_command(label="Clear",command=lambda:self._run(self.engine.clear),accelerator="Esc")
        settings_menu.add_command(label="Toggle Theme",command=self.toggle_theme)
        settings_menu.add_command(label="Scientific Panel",command=self.toggle_scientific)
        menubar.add_cascade(label="Settings",menu=settings_menu)

        help_menu=tk.Menu(menubar,tearoff=0)
        help_menu.add_command(label="Shortcuts",command=self.show_shortcuts)
        help_menu.add_separator(); help_menu.add_command(label="About",command=self.show_about)
        self.config(menu=menubar)

    # Theming
    def _theme_icon(self)->str: return "🌙" if self.view.theme == "light" else "☀️"

    def _button_bg(self,b:tk.Button)->str:
        p=self.palette
        if getattr(b,"_accent",False): return p.accent
        pending=self.engine.pending_operator
        if pending is not None and self.op_buttons.get(pending) is b: return p.accent
        if b in self.op_buttons.values(): return p.op_bg
        return p.btn_bg

    def _hover_bg(self,b:tk.Button)->str:
        p=self.palette; base=self._button_bg(b)
        return _mix(base,"#ffffff",0.08) if base==p.accent else _mix(base,p.btn_active,0.6)

    def _style_button(self,b:tk.Button)->None:
        p=self.palette; base=self._button_bg(b)
        fg="white" if base==p.accent else p.fg
        b.configure(bg=base,fg=fg,activebackground=p.btn_active,activeforeground=p.fg)

    def _apply_palette(self)->None:
        p=self.palette
        self.configure(bg=p.bg)
        for w in (self.root_frame,self.topbar,self.area,self.left_box,self.right_box):
            w.configure(bg=p.bg)
        self.title_label.configure(bg=p.bg,fg=p.fg)
        for b in (self.theme_btn,self.sci_btn):
            b.configure(bg=p.panel,fg=p.fg,activebackground=p.btn_active,activeforeground=p.fg)
        self.display_panel.configure(bg=p.display_bg,highlightbackground=p.border,highlightcolor=p.border,highlightthickness=1)
        self.trail_label.configure(bg=p.display_bg,fg=p.subtle)
        self.display_label.configure(bg=p.display_bg,fg=p.fg)
        for f in (self.grid_frame,self.sci_frame):
            f.configure(bg=p.panel,highlightbackground=p.border,highlightcolor=p.border,highlightthickness=1)
        for b in self.buttons: self._style_button(b)
        self.hist_header.configure(bg=p.bg,fg=p.fg)
        self.hist_container.configure(bg=p.panel,highlightbackground=p.border,highlightcolor=p.border,highlightthickness=1)
        self.history_list.configure(bg=p.panel,fg=p.fg,selectbackground=p.btn_active,selectforeground=p.fg)

    def toggle_theme(self)->None:
        self.view.toggle_theme()
        self.theme_btn.configure(text=self._theme_icon())
        self._apply_palette()

    def toggle_scientific(self)->None:
        if self.view.toggle_scientific(): self.sci_frame.grid(row=0,column=0,sticky="nsew",pady=(0,6))
        else: self.sci_frame.grid_remove()

    def set_mode(self,mode:str)->None:
        self.engine.settings.angle_mode=mode; self.engine.settings.validate()
        self.mode_var.set(mode)
        log.info("angle mode set to %s", mode)

    # ----------------------------- Actions ---------------------------------
    def _run(self, action: Callable[[], object]) -> None:
        action(); self._refresh()

    def _refresh(self) -> None:
        e=self.engine
        self.display_var.set(e.display)
        self.trail_var.set(e.history_text)
        tape=e.tape
        if self.history_list.size()!=len(tape):
            self.history_list.delete(0,"end")
            for line in tape: self.history_list.insert("end", line)
            self.history_list.see("end")
        for b in self.op_buttons.values(): self._style_button(b)

    def press_key(self, key: str) -> Optional[str]:
        out=self.engine.handle_key_input(key)
        if out is not None: self._refresh()
        return out

    # Keyboard
    def _on_key(self, event: tk.Event):
        key=_KEYSYM_KEYS.get(event.keysym) or event.char
        if not key: return None
        if self.press_key(key) is None: return None
        return "break"

    # About/help
    def show_about(self)->None:
        messagebox.showinfo("About",
            "Keypad Calculator (Tkinter)\n"
            "Chained operations • Scientific panel • History • Light/Dark", parent=self)
    def show_shortcuts(self)->None:
        messagebox.showinfo("Shortcuts",
            "0-9 .              : Digits / decimal point\n"
            "+ - * / ^ %        : Operators\n"
            "Enter / =          : Evaluate\n"
            "Esc / C            : Clear\n"
            "( )                : Parenthesis (text only)", parent=self)

# ============================= Entrypoint ===================================

def main()->int:
    setup_logging()
    try:
        app=CalculatorApp(); app.mainloop(); return 0
    except Exception as exc:
        log.exception("fatal error")
        messagebox.showerror("Fatal Error", str(exc)); return 1

if __name__=="__main__":
    raise SystemExit(main())
