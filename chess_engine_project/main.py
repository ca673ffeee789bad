#!/usr/bin/env python3
"""
Western Chess Engine 主入口文件

提供命令行接口：终端对弈、局面分析、自我对弈、perft 校验和配置管理。
"""

import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from chess_engine_project import __version__, __description__
from chess_engine_project.src.western_chess_engine.config import ConfigManager
from chess_engine_project.src.western_chess_engine.inference_interface import GameInterface
from chess_engine_project.src.western_chess_engine.rules_engine import Board, Color, GameState
from chess_engine_project.src.western_chess_engine.search_algorithm import MinimaxEngine, MoveGenerator
from chess_engine_project.src.western_chess_engine.utils import configure_logging

console = Console()

DEFAULT_CONFIG_DIR = "chess_engine_project/configs/western_chess_engine"


def print_banner():
    """打印项目横幅"""
    banner_text = Text()
    banner_text.append("♞ Western Chess Engine ♞\n", style="bold blue")
    banner_text.append(f"版本: {__version__}\n", style="green")
    banner_text.append(__description__, style="white")

    panel = Panel(
        banner_text,
        title="国际象棋引擎",
        title_align="center",
        border_style="blue",
        padding=(1, 2)
    )
    console.print(panel)


def render_board(board: Board) -> Table:
    """把棋盘渲染为表格，第8横线在上"""
    table = Table(show_header=True, show_lines=False, box=None, padding=(0, 1))
    table.add_column("")
    for file_char in "abcdefgh":
        table.add_column(file_char, justify="center")

    for row in range(Board.SIZE):
        cells = []
        for col in range(Board.SIZE):
            piece = board.piece_at((row, col))
            if piece is None:
                cells.append("[dim].[/dim]")
            elif piece.color is Color.WHITE:
                cells.append(f"[bold white]{piece.symbol}[/bold white]")
            else:
                cells.append(f"[bold red]{piece.symbol}[/bold red]")
        table.add_row(str(8 - row), *cells)
    return table


def print_status(game: GameInterface):
    status = game.get_game_status()
    console.print(
        f"[cyan]第 {status['move_number']} 回合，{status['active_color']} 行棋，"
        f"状态: {status['status']}[/cyan]"
    )


@click.group()
@click.version_option(version=__version__, prog_name="Western Chess Engine")
@click.option('--debug', is_flag=True, help='启用调试模式')
@click.option('--config-dir', type=click.Path(), default=DEFAULT_CONFIG_DIR, help='配置目录')
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_dir: str):
    """国际象棋引擎 - 规则引擎、alpha-beta 搜索AI与对局接口"""
    ctx.ensure_object(dict)
    manager = ConfigManager(config_dir)
    ctx.obj['config_manager'] = manager

    configure_logging(manager.get_system_config(), debug=debug)
    if debug:
        console.print("[yellow]调试模式已启用[/yellow]")


@cli.command()
def info():
    """显示系统信息"""
    print_banner()

    status_text = Text()
    status_text.append("📊 引擎组件\n", style="bold yellow")
    for name, description in (
        ("规则引擎", "走法生成、合法性验证、将死/逼和/和棋判定"),
        ("搜索算法", "子力位置评估、MVV-LVA 排序、alpha-beta 极小化极大搜索"),
        ("推理接口", "难度 1-6 的AI、对局门面、事件与快照"),
    ):
        status_text.append(f"• {name}: ", style="white")
        status_text.append(f"{description}\n", style="green")

    console.print(Panel(status_text, title="系统状态", border_style="yellow"))


@cli.command()
@click.option('--color', type=click.Choice(['white', 'black']), default='white', help='玩家执子颜色')
@click.option('--level', type=click.IntRange(1, 6), default=None, help='AI难度级别')
@click.pass_context
def play(ctx: click.Context, color: str, level: Optional[int]):
    """在终端中与AI对弈"""
    manager: ConfigManager = ctx.obj['config_manager']
    ai_config = manager.get_ai_config()
    if level is not None:
        ai_config.difficulty_level = level

    game = GameInterface(manager.get_game_config(), ai_config,
                         search_config=manager.get_search_config(),
                         evaluation_config=manager.get_evaluation_config())
    human = Color(color)
    console.print("[green]输入坐标走法（如 e2e4、e7e8q、O-O），或 undo / resign / moves / quit[/green]")

    while not game.is_game_over():
        console.print(render_board(game.board))
        print_status(game)

        if game.state.active_color is not human:
            move = game.ai_move()
            if move is None:
                console.print("[red]AI没有可走的棋[/red]")
                break
            console.print(f"[magenta]AI走法: {move.to_algebraic_notation()}[/magenta]")
            continue

        command = click.prompt("你的走法", type=str).strip()
        if command == 'quit':
            console.print("[yellow]对局已退出[/yellow]")
            return
        if command == 'resign':
            game.resign(human)
            break
        if command == 'moves':
            moves = sorted(move.to_coordinate_notation() for move in game.all_legal_moves())
            console.print(" ".join(moves))
            continue
        if command == 'undo':
            # 悔棋时连同AI的应着一起撤销
            undone = game.undo_last_move() and game.undo_last_move()
            if not undone:
                console.print("[yellow]无法悔棋[/yellow]")
            continue
        if not game.play_notation(command):
            console.print(f"[red]非法走法: {command}[/red]")

    console.print(render_board(game.board))
    status = game.get_game_status()
    console.print(Panel(
        f"结果: {status['status']} ({status['end_type']})\n棋谱: {game.get_move_list_text()}",
        title="对局结束", border_style="green"
    ))


@cli.command()
@click.option('--position', type=str, default=Board.INITIAL_NOTATION, help='紧凑记法局面')
@click.option('--depth', type=click.IntRange(1, 6), default=2, help='搜索深度')
@click.option('--color', type=click.Choice(['white', 'black']), default='white', help='行棋方')
@click.pass_context
def analyze(ctx: click.Context, position: str, depth: int, color: str):
    """分析局面并给出最佳走法"""
    board = Board.from_compact_notation(position)
    if board is None:
        console.print(f"[red]局面格式错误: {position}[/red]")
        sys.exit(1)

    manager: ConfigManager = ctx.obj['config_manager']
    engine = MinimaxEngine(config=manager.get_search_config())
    side = Color(color)
    state = GameState()
    state.set_active_color(side)
    state.record_position(board.to_compact_notation())

    console.print(render_board(board))
    move = engine.best_move(board, state, side, depth)
    stats = engine.last_statistics

    table = Table(title="分析结果")
    table.add_column("项目", style="cyan")
    table.add_column("值", style="green")
    table.add_row("最佳走法", move.to_coordinate_notation() if move else "无")
    table.add_row("评估", str(stats.best_score) if stats.best_score is not None else "-")
    table.add_row("搜索深度", str(stats.depth))
    table.add_row("节点数", str(stats.nodes))
    table.add_row("剪枝次数", str(stats.cutoffs))
    table.add_row("耗时", f"{stats.time_used:.3f}s")
    console.print(table)


@cli.command()
@click.option('--plies', type=click.IntRange(1, 500), default=40, help='最大半回合数')
@click.option('--level', type=click.IntRange(1, 6), default=3, help='AI难度级别')
@click.option('--seed', type=int, default=None, help='随机种子')
@click.pass_context
def selfplay(ctx: click.Context, plies: int, level: int, seed: Optional[int]):
    """AI自我对弈"""
    manager: ConfigManager = ctx.obj['config_manager']
    ai_config = manager.get_ai_config()
    ai_config.difficulty_level = level
    if seed is not None:
        ai_config.random_seed = seed

    game = GameInterface(manager.get_game_config(), ai_config,
                         search_config=manager.get_search_config(),
                         evaluation_config=manager.get_evaluation_config())

    for _ in range(plies):
        if game.is_game_over() or game.ai_move() is None:
            break

    console.print(render_board(game.board))
    console.print(f"[green]棋谱: {game.get_move_list_text()}[/green]")
    print_status(game)


@cli.command()
@click.option('--depth', type=click.IntRange(1, 5), default=3, help='perft 深度')
@click.option('--position', type=str, default=Board.INITIAL_NOTATION, help='紧凑记法局面')
@click.option('--color', type=click.Choice(['white', 'black']), default='white', help='行棋方')
def perft(depth: int, position: str, color: str):
    """统计走法树节点数，校验走法生成"""
    board = Board.from_compact_notation(position)
    if board is None:
        console.print(f"[red]局面格式错误: {position}[/red]")
        sys.exit(1)

    generator = MoveGenerator()
    table = Table(title="perft")
    table.add_column("深度", style="cyan")
    table.add_column("节点数", style="green")
    for current in range(1, depth + 1):
        table.add_row(str(current), str(generator.perft(board, Color(color), current)))
    console.print(table)


@cli.group()
def config():
    """配置管理"""


@config.command('show')
@click.pass_context
def config_show(ctx: click.Context):
    """显示全部配置"""
    manager: ConfigManager = ctx.obj['config_manager']
    for name, config_obj in manager.get_all_configs().items():
        table = Table(title=name)
        table.add_column("参数", style="cyan")
        table.add_column("值", style="green")
        for key, value in asdict(config_obj).items():
            if key == 'piece_square_tables':
                value = f"{len(value)} 张表"
            table.add_row(key, str(value))
        console.print(table)


@config.command('reset')
@click.argument('name', required=False)
@click.pass_context
def config_reset(ctx: click.Context, name: Optional[str]):
    """重置配置为默认值"""
    manager: ConfigManager = ctx.obj['config_manager']
    names = [name] if name else list(manager.get_all_configs().keys())
    for config_name in names:
        manager.reset_config(config_name)
        console.print(f"[green]已重置配置: {config_name}[/green]")


@config.command('export')
@click.argument('export_path', type=click.Path())
@click.pass_context
def config_export(ctx: click.Context, export_path: str):
    """导出全部配置（.yaml/.yml 或 .json）"""
    manager: ConfigManager = ctx.obj['config_manager']
    manager.export_configs(export_path)
    console.print(f"[green]配置已导出到: {export_path}[/green]")


def main():
    """主入口函数"""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]程序被用户中断[/yellow]")
        sys.exit(0)
    except Exception as e:
        console.print(f"[red]发生错误: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
